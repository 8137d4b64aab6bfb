"""Tests for gateway row parsing."""

from datetime import datetime, timezone

import pytest

from showcase.core.models import Comment, Project, parse_timestamp


@pytest.mark.parametrize("value, micros", [
    ("2024-06-15T12:00:00.12345+00:00", 123450),
    ("2024-06-15T12:00:00.1+00:00", 100000),
    ("2024-06-15T12:00:00.1234567Z", 123456),
    ("2024-06-15T12:00:00+00:00", 0),
])
def test_postgres_fraction_lengths(value, micros):
    assert parse_timestamp(value) == datetime(2024, 6, 15, 12, 0, 0, micros, tzinfo=timezone.utc)


def test_naive_timestamps_are_utc():
    assert parse_timestamp("2024-06-15T12:00:00").tzinfo == timezone.utc


def test_rows_with_trimmed_fractions_parse():
    project = Project.from_row({
        "id": 1, "user_id": 2, "title": "Orbit", "vercel_url": "https://orbit.example.com",
        "created_at": "2024-06-15T12:00:00.5+00:00", "vote_count": 3,
    })
    comment = Comment.from_row({
        "id": 7, "user_id": 2, "project_id": 1, "content": "Nice",
        "created_at": "2024-06-15T12:00:00.12345+00:00",
        "updated_at": "2024-06-15T13:00:00.9+00:00",
        "users": {"email": "ada@example.com"},
    })
    assert project.created_at.microsecond == 500000
    assert comment.updated_at.microsecond == 900000
    assert comment.author_name == "ada@example.com"
