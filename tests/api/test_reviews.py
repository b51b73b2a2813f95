"""Rating recorder, average rating and the public review listing."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from studynotion.models.account import Account
from tests.conftest import auth_headers, create_account, create_course, enroll, get_course


def _review(client: TestClient, headers: dict[str, str], course_id, rating, text="Great"):
    return client.post(
        "/v1/reviews",
        json={"courseId": str(course_id), "rating": rating, "review": text},
        headers=headers,
    )


# ---- create ----


@pytest.mark.parametrize("rating", [1, 5])
def test_review_accepts_boundary_ratings(
    client: TestClient, buyer: Account, buyer_headers: dict[str, str], rating: int
) -> None:
    course = create_course()
    enroll(buyer, course)

    resp = _review(client, buyer_headers, course.id, rating)

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Rating and Review created successfully"
    assert body["review"]["rating"] == rating
    assert body["review"]["user_id"] == str(buyer.id)
    assert [str(r) for r in get_course(course).reviews] == [body["review"]["id"]]


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_review_rejects_out_of_range_rating(
    client: TestClient, buyer: Account, buyer_headers: dict[str, str], rating: int
) -> None:
    course = create_course()
    enroll(buyer, course)

    resp = _review(client, buyer_headers, course.id, rating)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Rating should be between 1 and 5"
    assert get_course(course).reviews == ()


def test_review_requires_enrollment(
    client: TestClient, buyer_headers: dict[str, str]
) -> None:
    course = create_course()
    resp = _review(client, buyer_headers, course.id, 4)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Student is not enrolled in the course"


def test_review_unknown_course_is_not_enrolled(
    client: TestClient, buyer_headers: dict[str, str]
) -> None:
    resp = _review(client, buyer_headers, "00000000-0000-0000-0000-000000000999", 4)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Student is not enrolled in the course"


def test_second_review_is_403(
    client: TestClient, buyer: Account, buyer_headers: dict[str, str]
) -> None:
    course = create_course()
    enroll(buyer, course)

    assert _review(client, buyer_headers, course.id, 4).status_code == 200
    resp = _review(client, buyer_headers, course.id, 2, "Changed my mind")

    assert resp.status_code == 403
    assert resp.json()["message"] == "Course is already reviewed by the user"
    assert len(get_course(course).reviews) == 1


def test_review_requires_token(client: TestClient) -> None:
    course = create_course()
    resp = client.post(
        "/v1/reviews", json={"courseId": str(course.id), "rating": 5, "review": "x"}
    )
    assert resp.status_code == 401


# ---- average ----


def test_average_rating_without_reviews_is_zero(client: TestClient) -> None:
    course = create_course()
    resp = client.get(f"/v1/courses/{course.id}/average-rating")
    assert resp.status_code == 200
    body = resp.json()
    assert body["average_rating"] == 0
    assert body["message"] == "Average rating is 0, no ratings given till now"


def test_average_rating_is_mean(client: TestClient) -> None:
    course = create_course()
    for i, rating in enumerate([5, 4, 3]):
        student = create_account(email=f"s{i}@example.com")
        enroll(student, course)
        assert _review(client, auth_headers(student), course.id, rating).status_code == 200

    resp = client.get(f"/v1/courses/{course.id}/average-rating")

    assert resp.json()["average_rating"] == pytest.approx(4.0)


def test_average_rating_ignores_other_courses(client: TestClient) -> None:
    rated = create_course(name="Rated")
    other = create_course(name="Other")
    student = create_account()
    enroll(student, rated)
    enroll(student, other)
    _review(client, auth_headers(student), rated.id, 2)
    _review(client, auth_headers(student), other.id, 5)

    resp = client.get(f"/v1/courses/{rated.id}/average-rating")

    assert resp.json()["average_rating"] == pytest.approx(2.0)


# ---- listing ----


def test_list_reviews_sorted_by_rating_with_author_and_course(client: TestClient) -> None:
    course = create_course(name="Python Basics")
    low = create_account(email="low@example.com", first_name="Lena", last_name="Low")
    high = create_account(email="high@example.com", first_name="Hari", last_name="High")
    for student in (low, high):
        enroll(student, course)
    _review(client, auth_headers(low), course.id, 2, "Too fast")
    _review(client, auth_headers(high), course.id, 5, "Loved it")

    resp = client.get("/v1/reviews")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [r["rating"] for r in data] == [5, 2]
    top = data[0]
    assert top["first_name"] == "Hari"
    assert top["last_name"] == "High"
    assert top["email"] == "high@example.com"
    assert top["course_name"] == "Python Basics"
    assert top["review"] == "Loved it"


def test_list_reviews_is_public_and_empty_by_default(client: TestClient) -> None:
    resp = client.get("/v1/reviews")
    assert resp.status_code == 200
    assert resp.json()["data"] == []


def test_average_rating_success_message(client: TestClient) -> None:
    course = create_course()
    student = create_account()
    enroll(student, course)
    _review(client, auth_headers(student), course.id, 3)

    resp = client.get(f"/v1/courses/{course.id}/average-rating")

    assert resp.json() == {
        "success": True,
        "message": "Average rating retrieved successfully",
        "average_rating": 3.0,
    }
