"""Local reminder scheduling from predicted dates.

Two reminder kinds per user:
    period: ``period_lead_days`` before the predicted next period start
    ovulation: on the predicted ovulation date

Identifiers are ``<kind>_reminder_<user_id>``, so rescheduling a user
replaces that user's earlier reminder instead of adding a duplicate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, Protocol
from uuid import UUID

from src.models.users import AppPreferences, User
from src.tracker import predictor
from src.tracker.config_loader import TrackerConfig, get_tracker_config

logger = logging.getLogger("cyclekeeper.tracker.reminders")

REMINDER_KINDS = ("period", "ovulation")


@dataclass(frozen=True)
class Reminder:
    """A one-shot local notification.

    Attributes:
        identifier: Unique per user and kind.
        user_id:    Profile the reminder belongs to.
        kind:       'period' or 'ovulation'.
        fire_at:    Local date and time to deliver.
        title:      Notification title.
        body:       Notification body text.
    """

    identifier: str
    user_id: UUID
    kind: str
    fire_at: datetime
    title: str
    body: str


def reminder_identifier(kind: str, user_id: UUID) -> str:
    return f"{kind}_reminder_{user_id}"


class NotificationSink(Protocol):
    def add(self, reminder: Reminder) -> None: ...

    def remove(self, identifier: str) -> None: ...


class InMemoryNotificationSink:
    """Holds pending reminders keyed by identifier."""

    def __init__(self) -> None:
        self.pending: dict[str, Reminder] = {}

    def add(self, reminder: Reminder) -> None:
        self.pending[reminder.identifier] = reminder

    def remove(self, identifier: str) -> None:
        self.pending.pop(identifier, None)

    def for_user(self, user_id: UUID) -> list[Reminder]:
        return sorted(
            (r for r in self.pending.values() if r.user_id == user_id),
            key=lambda r: r.fire_at,
        )


class ReminderScheduler:
    """Turn predictions into reminders on a ``NotificationSink``.

    Usage::

        scheduler = ReminderScheduler(InMemoryNotificationSink())
        scheduler.schedule_all(store.users, prefs)
    """

    def __init__(
        self, sink: NotificationSink, config: TrackerConfig | None = None
    ) -> None:
        self.sink = sink
        self._config = config or get_tracker_config()

    def _at_hour(self, day: date) -> datetime:
        return datetime.combine(day, time(hour=self._config.reminders.reminder_hour))

    def build(self, user: User) -> list[Reminder]:
        """Reminders ``user`` should have; empty when nothing can be predicted."""
        reminders: list[Reminder] = []

        nxt = predictor.next_period_start(user)
        fire_day = (
            predictor.shift(nxt, -self._config.reminders.period_lead_days)
            if nxt is not None
            else None
        )
        if fire_day is not None:
            reminders.append(
                Reminder(
                    identifier=reminder_identifier("period", user.id),
                    user_id=user.id,
                    kind="period",
                    fire_at=self._at_hour(fire_day),
                    title="Period reminder",
                    body=f"{user.name}, your period may start soon",
                )
            )

        ov = predictor.ovulation_date(user, self._config)
        if ov is not None:
            reminders.append(
                Reminder(
                    identifier=reminder_identifier("ovulation", user.id),
                    user_id=user.id,
                    kind="ovulation",
                    fire_at=self._at_hour(ov),
                    title="Ovulation reminder",
                    body=f"{user.name}, you are in your ovulation window",
                )
            )
        return reminders

    def cancel_for(self, user: User) -> None:
        for kind in REMINDER_KINDS:
            self.sink.remove(reminder_identifier(kind, user.id))

    def schedule_for(self, user: User) -> list[Reminder]:
        """Replace ``user``'s pending reminders with fresh ones."""
        self.cancel_for(user)
        reminders = self.build(user)
        for reminder in reminders:
            self.sink.add(reminder)
        logger.info("Scheduled %d reminder(s) for %s", len(reminders), user.id)
        return reminders

    def schedule_all(
        self, users: Iterable[User], prefs: AppPreferences | None = None
    ) -> list[Reminder]:
        """Reschedule every user; cancels everything when notifications are off."""
        enabled = prefs.notifications_enabled if prefs is not None else True
        scheduled: list[Reminder] = []
        for user in users:
            if enabled:
                scheduled.extend(self.schedule_for(user))
            else:
                self.cancel_for(user)
        if not enabled:
            logger.info("Notifications disabled; pending reminders cancelled")
        return scheduled
