"""HTML bodies for transactional email.

User-supplied values are escaped; course names come from instructors.
"""

from __future__ import annotations

import html

_LAYOUT = """<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; color: #161d29;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px; text-align: center;">
      <h2>{heading}</h2>
      {content}
      <p style="font-size: 14px; color: #999999;">
        If you have any questions, reply to this email and we will help.
      </p>
    </div>
  </body>
</html>
"""


def course_enrollment_email(course_name: str, first_name: str) -> str:
    content = (
        f"<p>Dear {html.escape(first_name)},</p>"
        f"<p>You have successfully registered for the course "
        f"<strong>{html.escape(course_name)}</strong>. "
        f"Log in to your dashboard to start learning.</p>"
    )
    return _LAYOUT.format(heading="Course Registration Confirmation", content=content)


def payment_success_email(
    first_name: str, amount: float, currency: str, order_id: str, payment_id: str
) -> str:
    content = (
        f"<p>Dear {html.escape(first_name)},</p>"
        f"<p>We have received a payment of <strong>{html.escape(currency)} {amount:,.2f}</strong>.</p>"
        f"<p>Payment ID: <strong>{html.escape(payment_id)}</strong></p>"
        f"<p>Order ID: <strong>{html.escape(order_id)}</strong></p>"
    )
    return _LAYOUT.format(heading="Payment Confirmation", content=content)
