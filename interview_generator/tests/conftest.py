"""Shared fixtures for the interview generator tests."""
from typing import List

import pytest

from interview_generator.client.notifications import Notification, NotificationSink
from interview_generator.client.state import ApplicationState
from interview_generator.schemas.interview import Interview


class RecordingSink(NotificationSink):
    """Collects notifications so tests can count them."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def errors(self) -> List[Notification]:
        return [n for n in self.notifications if n.is_error]

    @property
    def successes(self) -> List[Notification]:
        return [n for n in self.notifications if not n.is_error]


def make_interview(role: str = "PM", industry: str = "Tech", prefix: str = "") -> Interview:
    return Interview(
        role=role,
        industry=industry,
        question_one=f"{prefix}a",
        question_two=f"{prefix}b",
        question_three=f"{prefix}c",
        question_four=f"{prefix}d",
        question_five=f"{prefix}e",
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def state() -> ApplicationState:
    return ApplicationState()


@pytest.fixture
def interview_records() -> List[dict]:
    return [
        make_interview("PM", "Tech").model_dump(),
        make_interview("Nurse", "Health, Care", prefix="x-").model_dump(),
    ]
