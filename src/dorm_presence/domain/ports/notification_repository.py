"""Notification repository port."""

from typing import Protocol

from dorm_presence.domain.models.notification import StudentNotification


class NotificationRepository(Protocol):
    """Port for student notifications."""

    async def create_student_notification(
        self, notification: StudentNotification
    ) -> StudentNotification:
        """Store a notification and return it with its id set."""
        ...

    async def list_student_notifications(self, user_id: str) -> list[StudentNotification]:
        """List a student's notifications, newest first."""
        ...
