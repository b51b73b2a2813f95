"""Background worker process.

RUN:  python -m studynotion.worker

The API only enqueues email tasks; this process delivers them so a slow
or unreachable mail provider never holds up a checkout.  Same image,
different command:

  api:    uvicorn studynotion.main:app --host 0.0.0.0 --port 8000
  worker: python -m studynotion.worker

The loop polls every registered queue, dispatches one task at a time to
its handler and logs the outcome.  A failed task is logged and counted,
then dropped; there are no retries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from studynotion.core.config import SETTINGS
from studynotion.core.logging import setup_logging
from studynotion.core.metrics import EMAILS_PROCESSED, QUEUE_DEPTH
from studynotion.services.mailer import OutgoingEmail, mailer
from studynotion.services.task_queue import EMAIL_QUEUE, Task, task_queue

TaskHandler = Callable[[dict], Coroutine[Any, Any, None]]

logger = logging.getLogger("studynotion.worker")


# ---------------------------------------------------------------------------
# Handler registry
# ---------------------------------------------------------------------------

HANDLERS: dict[str, TaskHandler] = {}


def register_handler(queue: str):
    """Decorator: register a coroutine as the handler for a queue."""

    def decorator(func):
        HANDLERS[queue] = func
        return func

    return decorator


@register_handler(EMAIL_QUEUE)
async def handle_email(payload: dict) -> None:
    """Deliver one ``{to, subject, body}`` email through the configured mailer."""
    try:
        email = OutgoingEmail(
            to=payload["to"], subject=payload["subject"], body=payload["body"]
        )
    except KeyError as exc:
        raise ValueError(f"email task is missing {exc.args[0]!r}") from exc
    await mailer.send(email)


# ---------------------------------------------------------------------------
# Main worker loop
# ---------------------------------------------------------------------------


async def process_task(task: Task) -> bool:
    """Run one task through its handler; True when it succeeded."""
    handler = HANDLERS[task.queue]
    try:
        await handler(task.payload)
    except Exception:
        EMAILS_PROCESSED.labels(result="failed").inc()
        logger.exception("Task %s on [%s] failed", task.id, task.queue)
        return False
    EMAILS_PROCESSED.labels(result="sent").inc()
    logger.info("Task %s on [%s] completed", task.id, task.queue)
    return True


async def run_worker() -> None:
    """Poll all registered queues and dispatch tasks to handlers."""
    queues = list(HANDLERS.keys())
    logger.info("Worker started, listening on queues: %s", queues)

    while True:
        idle = True
        for queue_name in queues:
            task = await task_queue.dequeue(queue_name, timeout=1)
            QUEUE_DEPTH.labels(queue_name=queue_name).set(
                await task_queue.queue_length(queue_name)
            )
            if task is None:
                continue
            idle = False
            await process_task(task)
        if idle:
            # The in-memory queue returns immediately when empty.
            await asyncio.sleep(0.5)


if __name__ == "__main__":
    setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
    asyncio.run(run_worker())
