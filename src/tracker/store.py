"""In-memory user collection with write-through persistence.

``CycleStore`` is the single owner of the user list and the selected-user
index.  Every mutation goes through one of its methods, which:

1. applies the change in memory
2. writes the entire user list through the ``UserRepository``
3. notifies subscribers with a ``ChangeEvent``

If step 2 fails the change stays in memory, the store is marked dirty, and
``PersistenceError`` propagates to the caller.  Subscribers are not told
about changes that were not persisted; ``flush()`` retries the write.

Reads hand out copies, so callers cannot mutate store state behind its back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable
from uuid import UUID

from src.models.tracking import FlowIntensity, MenstrualCycle, Symptom, SymptomType
from src.models.users import User
from src.tracker.config_loader import TrackerConfig, get_tracker_config
from src.tracker.errors import PersistenceError, UserIndexError
from src.tracker.persistence import UserRepository

logger = logging.getLogger("cyclekeeper.tracker.store")


@dataclass(frozen=True)
class ChangeEvent:
    """Emitted after a mutation has been persisted.

    Attributes:
        operation:  Store method name, e.g. 'add_cycle'.
        user_id:    Affected user, or None for collection-wide changes.
        record_id:  Cycle/symptom id for record-level operations.
        at:         UTC time the change was committed.
    """

    operation: str
    user_id: UUID | None = None
    record_id: UUID | None = None
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Listener = Callable[[ChangeEvent], None]


class CycleStore:
    """Owns the user profiles and the current selection.

    Usage::

        store = CycleStore.open(UserRepository(FileKeyValueStore(data_dir)))
        cycle = store.add_cycle(date(2024, 1, 1))
        store.delete_cycle(cycle.id)
    """

    def __init__(
        self,
        repository: UserRepository,
        users: list[User] | None = None,
        config: TrackerConfig | None = None,
    ) -> None:
        self._repository = repository
        self._config = config or get_tracker_config()
        self._users: list[User] = list(users or [])
        self._selected_index = 0
        self._listeners: list[Listener] = []
        self.dirty = False

    @classmethod
    def open(
        cls, repository: UserRepository, config: TrackerConfig | None = None
    ) -> CycleStore:
        """Load stored users, creating the default pair on first launch.

        Raises:
            PersistenceError: If stored data cannot be read, or the first
                              launch defaults cannot be written.
        """
        users = repository.load()
        store = cls(repository, users, config)
        if not store._users:
            logger.info("No stored users; creating defaults")
            store._users = store._default_users()
            store._commit("create_defaults")
        else:
            logger.info("Opened store with %d users", len(store._users))
        return store

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def users(self) -> tuple[User, ...]:
        return tuple(u.model_copy(deep=True) for u in self._users)

    @property
    def selected_index(self) -> int:
        return self._selected_index

    def _has_index(self, index: int) -> bool:
        return 0 <= index < len(self._users)

    @property
    def current_user(self) -> User:
        """The selected user, or a placeholder when the index has no user."""
        if not self._has_index(self._selected_index):
            return self._new_user(self._config.defaults.placeholder_user_name)
        return self._users[self._selected_index].model_copy(deep=True)

    def find_cycle(self, cycle_id: UUID) -> MenstrualCycle | None:
        user = self.current_user
        return next((c for c in user.cycles if c.id == cycle_id), None)

    def find_symptom(self, symptom_id: UUID) -> Symptom | None:
        user = self.current_user
        return next((s for s in user.symptoms if s.id == symptom_id), None)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for change events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed for %s", event.operation)

    # ------------------------------------------------------------------
    # Selection and users
    # ------------------------------------------------------------------

    def select_user(self, index: int) -> None:
        """Change the selection.  Out-of-range indexes read as the placeholder."""
        if not self._has_index(index):
            logger.warning(
                "Selecting index %d with %d users; reads fall back to placeholder",
                index,
                len(self._users),
            )
        self._selected_index = index
        self._notify(ChangeEvent("select_user"))

    def add_user(
        self,
        name: str,
        cycle_length: int | None = None,
        period_length: int | None = None,
    ) -> User:
        user = self._new_user(name, cycle_length, period_length)
        self._users.append(user)
        self._commit("add_user", user_id=user.id)
        return user.model_copy(deep=True)

    def update_user_settings(
        self, name: str, cycle_length: int, period_length: int
    ) -> User:
        """Replace name and lengths on the selected user.

        Lengths must be positive; range checks are the caller's job.
        """
        index = self._require_selected()
        updated = self._users[index].model_copy()
        updated.name = name
        updated.cycle_length = cycle_length
        updated.period_length = period_length
        self._users[index] = updated
        self._commit("update_user_settings", user_id=updated.id)
        return updated.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def add_cycle(
        self,
        start_date: date,
        end_date: date | None = None,
        flow: FlowIntensity = FlowIntensity.medium,
        notes: str = "",
    ) -> MenstrualCycle:
        """Append a cycle to the selected user.  No overlap or order checks."""
        user = self._users[self._require_selected()]
        cycle = MenstrualCycle(
            start_date=start_date, end_date=end_date, flow=flow, notes=notes
        )
        user.cycles.append(cycle)
        self._commit("add_cycle", user_id=user.id, record_id=cycle.id)
        return cycle.model_copy()

    def add_symptom(
        self,
        date: date,
        type: SymptomType,
        severity: int,
        notes: str = "",
    ) -> Symptom:
        """Append a symptom to the selected user.  Severity is stored as given."""
        user = self._users[self._require_selected()]
        symptom = Symptom(date=date, type=type, severity=severity, notes=notes)
        user.symptoms.append(symptom)
        self._commit("add_symptom", user_id=user.id, record_id=symptom.id)
        return symptom.model_copy()

    def delete_cycle(self, cycle_id: UUID) -> bool:
        """Remove the selected user's cycle with ``cycle_id``.

        Returns:
            True if a cycle was removed; False (and nothing written) otherwise.
        """
        user = self._users[self._require_selected()]
        for i, cycle in enumerate(user.cycles):
            if cycle.id == cycle_id:
                del user.cycles[i]
                self._commit("delete_cycle", user_id=user.id, record_id=cycle_id)
                return True
        logger.debug("delete_cycle: %s not found for %s", cycle_id, user.id)
        return False

    def delete_symptom(self, symptom_id: UUID) -> bool:
        """Remove the selected user's symptom with ``symptom_id``."""
        user = self._users[self._require_selected()]
        for i, symptom in enumerate(user.symptoms):
            if symptom.id == symptom_id:
                del user.symptoms[i]
                self._commit("delete_symptom", user_id=user.id, record_id=symptom_id)
                return True
        logger.debug("delete_symptom: %s not found for %s", symptom_id, user.id)
        return False

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def clear_current_user_data(self) -> None:
        user = self._users[self._require_selected()]
        user.cycles.clear()
        user.symptoms.clear()
        self._commit("clear_current_user_data", user_id=user.id)

    def clear_all_data(self) -> None:
        for user in self._users:
            user.cycles.clear()
            user.symptoms.clear()
        self._commit("clear_all_data")

    def reset_app(self) -> None:
        """Drop every user and recreate the two defaults, selecting the first."""
        self._users = self._default_users()
        self._selected_index = 0
        self._commit("reset_app")

    def flush(self) -> None:
        """Retry persisting after an earlier failed save."""
        self._commit("flush")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _new_user(
        self,
        name: str,
        cycle_length: int | None = None,
        period_length: int | None = None,
    ) -> User:
        d = self._config.defaults
        return User(
            name=name,
            cycle_length=cycle_length if cycle_length is not None else d.cycle_length,
            period_length=period_length if period_length is not None else d.period_length,
        )

    def _default_users(self) -> list[User]:
        return [self._new_user(name) for name in self._config.defaults.user_names]

    def _require_selected(self) -> int:
        if not self._has_index(self._selected_index):
            raise UserIndexError(self._selected_index, len(self._users))
        return self._selected_index

    def _commit(
        self,
        operation: str,
        user_id: UUID | None = None,
        record_id: UUID | None = None,
    ) -> None:
        try:
            self._repository.save(self._users)
        except PersistenceError:
            self.dirty = True
            logger.error("%s applied in memory but not persisted", operation)
            raise
        self.dirty = False
        logger.info("%s committed (user=%s)", operation, user_id)
        self._notify(ChangeEvent(operation, user_id=user_id, record_id=record_id))
