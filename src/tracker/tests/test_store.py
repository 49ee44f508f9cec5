"""Tests for CycleStore mutations, selection, persistence and notifications."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.models.tracking import FlowIntensity, SymptomType
from src.tracker.config_loader import TrackerConfig
from src.tracker.errors import PersistenceError, UserIndexError
from src.tracker.persistence import InMemoryKeyValueStore, UserRepository
from src.tracker.store import ChangeEvent, CycleStore


class TestOpen:
    def test_first_launch_creates_two_defaults(
        self, store: CycleStore, kv: InMemoryKeyValueStore
    ) -> None:
        assert [u.name for u in store.users] == ["User 1", "User 2"]
        assert all(u.cycle_length == 28 and u.period_length == 5 for u in store.users)
        assert store.selected_index == 0
        assert kv.write_count == 1

    def test_reopen_loads_saved_users(
        self, store: CycleStore, repository: UserRepository, tracker_config: TrackerConfig
    ) -> None:
        cycle = store.add_cycle(date(2024, 1, 1))
        reopened = CycleStore.open(repository, tracker_config)
        assert [u.id for u in reopened.users] == [u.id for u in store.users]
        assert reopened.current_user.cycles[0].id == cycle.id

    def test_corrupt_storage_raises(self, tracker_config: TrackerConfig) -> None:
        kv = InMemoryKeyValueStore({"SavedUsers": b"not json"})
        with pytest.raises(PersistenceError):
            CycleStore.open(UserRepository(kv), tracker_config)


class TestRecords:
    def test_add_cycle_appends_to_selected_user(self, store: CycleStore) -> None:
        cycle = store.add_cycle(
            date(2024, 1, 1), date(2024, 1, 5), FlowIntensity.heavy, "first"
        )
        user = store.current_user
        assert [c.id for c in user.cycles] == [cycle.id]
        assert user.cycles[0].flow == FlowIntensity.heavy
        assert user.cycles[0].duration == 4
        assert store.users[1].cycles == []

    def test_add_cycle_accepts_duplicates(self, store: CycleStore) -> None:
        store.add_cycle(date(2024, 1, 1))
        store.add_cycle(date(2024, 1, 1))
        assert len(store.current_user.cycles) == 2

    def test_add_cycle_defaults(self, store: CycleStore) -> None:
        cycle = store.add_cycle(date(2024, 1, 1))
        assert cycle.end_date is None
        assert cycle.flow == FlowIntensity.medium
        assert cycle.notes == ""
        assert cycle.duration == 0

    def test_add_then_delete_symptom(self, store: CycleStore) -> None:
        cycle = store.add_cycle(date(2024, 1, 1))
        symptom = store.add_symptom(date(2024, 2, 1), SymptomType.cramps, 3)
        assert store.delete_symptom(symptom.id) is True
        user = store.current_user
        assert user.symptoms == []
        assert [c.id for c in user.cycles] == [cycle.id]

    @pytest.mark.parametrize("severity", [0, -1, 6, 99])
    def test_severity_is_not_clamped(self, store: CycleStore, severity: int) -> None:
        symptom = store.add_symptom(date(2024, 2, 1), SymptomType.headache, severity)
        assert symptom.severity == severity
        assert store.current_user.symptoms[0].severity == severity

    def test_notes_are_stored_verbatim(
        self, store: CycleStore, repository: UserRepository
    ) -> None:
        cycle = store.add_cycle(date(2024, 1, 1), notes="  cramps at night\n")
        symptom = store.add_symptom(
            date(2024, 1, 2), SymptomType.fatigue, 2, notes=" tired "
        )
        assert store.find_cycle(cycle.id).notes == "  cramps at night\n"
        assert store.find_symptom(symptom.id).notes == " tired "
        saved = repository.load()[0]
        assert saved.cycles[0].notes == "  cramps at night\n"
        assert saved.symptoms[0].notes == " tired "

    def test_delete_unknown_id_is_noop(
        self, store: CycleStore, kv: InMemoryKeyValueStore
    ) -> None:
        store.add_cycle(date(2024, 1, 1))
        writes = kv.write_count
        assert store.delete_cycle(uuid4()) is False
        assert store.delete_symptom(uuid4()) is False
        assert len(store.current_user.cycles) == 1
        assert kv.write_count == writes

    def test_delete_cycle(self, store: CycleStore) -> None:
        keep = store.add_cycle(date(2024, 1, 1))
        drop = store.add_cycle(date(2024, 2, 1))
        assert store.delete_cycle(drop.id) is True
        assert [c.id for c in store.current_user.cycles] == [keep.id]

    def test_find_records(self, store: CycleStore) -> None:
        cycle = store.add_cycle(date(2024, 1, 1))
        symptom = store.add_symptom(date(2024, 1, 2), SymptomType.fatigue, 2)
        assert store.find_cycle(cycle.id).start_date == date(2024, 1, 1)
        assert store.find_symptom(symptom.id).type == SymptomType.fatigue
        assert store.find_cycle(uuid4()) is None


class TestUsers:
    def test_update_user_settings(self, store: CycleStore) -> None:
        store.update_user_settings("Mia", 30, 6)
        user = store.current_user
        assert (user.name, user.cycle_length, user.period_length) == ("Mia", 30, 6)

    def test_update_settings_does_not_enforce_advisory_range(self, store: CycleStore) -> None:
        store.update_user_settings("Mia", 40, 10)
        assert store.current_user.cycle_length == 40

    def test_update_settings_rejects_non_positive_lengths(self, store: CycleStore) -> None:
        with pytest.raises(ValidationError):
            store.update_user_settings("Mia", 0, 5)
        assert store.current_user.name == "User 1"

    def test_add_user_uses_config_defaults(self, store: CycleStore) -> None:
        user = store.add_user("Third")
        assert len(store.users) == 3
        assert (user.cycle_length, user.period_length) == (28, 5)

    def test_select_user_switches_target(self, store: CycleStore) -> None:
        store.select_user(1)
        store.add_cycle(date(2024, 1, 1))
        assert store.users[0].cycles == []
        assert len(store.users[1].cycles) == 1


class TestSelection:
    def test_out_of_range_read_returns_placeholder(self, store: CycleStore) -> None:
        store.select_user(7)
        user = store.current_user
        assert user.name == "Default User"
        assert user.cycles == []

    def test_negative_index_reads_placeholder(self, store: CycleStore) -> None:
        store.select_user(-1)
        assert store.current_user.name == "Default User"

    def test_out_of_range_write_raises(self, store: CycleStore) -> None:
        store.select_user(7)
        with pytest.raises(UserIndexError):
            store.add_cycle(date(2024, 1, 1))

    def test_reads_are_copies(self, store: CycleStore) -> None:
        store.add_cycle(date(2024, 1, 1))
        user = store.current_user
        user.cycles.clear()
        assert len(store.current_user.cycles) == 1


class TestBulk:
    def test_clear_current_user_data_is_idempotent(self, store: CycleStore) -> None:
        store.add_cycle(date(2024, 1, 1))
        store.add_symptom(date(2024, 1, 2), SymptomType.acne, 1)
        store.select_user(1)
        store.add_cycle(date(2024, 1, 3))
        store.select_user(0)

        store.clear_current_user_data()
        once = store.users
        store.clear_current_user_data()
        assert store.users == once
        assert store.users[0].cycles == [] and store.users[0].symptoms == []
        assert len(store.users[1].cycles) == 1

    def test_clear_all_data(self, store: CycleStore) -> None:
        store.add_cycle(date(2024, 1, 1))
        store.select_user(1)
        store.add_symptom(date(2024, 1, 2), SymptomType.bloating, 2)
        store.clear_all_data()
        assert all(u.cycles == [] and u.symptoms == [] for u in store.users)
        assert len(store.users) == 2

    def test_reset_app(self, store: CycleStore) -> None:
        store.add_user("Third")
        store.update_user_settings("Renamed", 33, 7)
        store.add_cycle(date(2024, 1, 1))
        store.select_user(2)
        old_ids = {u.id for u in store.users}

        store.reset_app()

        users = store.users
        assert [u.name for u in users] == ["User 1", "User 2"]
        assert all(u.cycle_length == 28 and u.period_length == 5 for u in users)
        assert all(u.cycles == [] and u.symptoms == [] for u in users)
        assert store.selected_index == 0
        assert not old_ids & {u.id for u in users}


class TestPersistence:
    @pytest.mark.parametrize(
        "mutate, expected_cycles, expected_symptoms",
        [
            (lambda s, c, y: s.update_user_settings("Renamed", 30, 4), 1, 1),
            (lambda s, c, y: s.delete_cycle(c), 0, 1),
            (lambda s, c, y: s.delete_symptom(y), 1, 0),
            (lambda s, c, y: s.clear_current_user_data(), 0, 0),
            (lambda s, c, y: s.clear_all_data(), 0, 0),
            (lambda s, c, y: s.reset_app(), 0, 0),
        ],
        ids=[
            "update_user_settings",
            "delete_cycle",
            "delete_symptom",
            "clear_current_user_data",
            "clear_all_data",
            "reset_app",
        ],
    )
    def test_each_mutation_writes_full_list(
        self,
        store: CycleStore,
        kv: InMemoryKeyValueStore,
        repository: UserRepository,
        mutate,
        expected_cycles: int,
        expected_symptoms: int,
    ) -> None:
        cycle = store.add_cycle(date(2024, 1, 1))
        symptom = store.add_symptom(date(2024, 1, 2), SymptomType.cramps, 3)
        writes = kv.write_count

        mutate(store, cycle.id, symptom.id)

        assert kv.write_count == writes + 1
        saved = repository.load()
        assert saved is not None
        assert [u.model_dump() for u in saved] == [u.model_dump() for u in store.users]
        assert len(saved[0].cycles) == expected_cycles
        assert len(saved[0].symptoms) == expected_symptoms

    def test_every_mutation_writes_full_list(
        self, store: CycleStore, repository: UserRepository
    ) -> None:
        store.add_cycle(date(2024, 1, 1))
        store.add_symptom(date(2024, 1, 2), SymptomType.cramps, 3)
        saved = repository.load()
        assert saved is not None
        assert len(saved) == 2
        assert len(saved[0].cycles) == 1 and len(saved[0].symptoms) == 1

    def test_failed_save_surfaces_and_keeps_memory(
        self, store: CycleStore, kv: InMemoryKeyValueStore, repository: UserRepository
    ) -> None:
        kv.fail_writes = True
        with pytest.raises(PersistenceError):
            store.add_cycle(date(2024, 1, 1))
        assert store.dirty is True
        assert len(store.current_user.cycles) == 1
        assert repository.load()[0].cycles == []

    def test_flush_retries_after_failure(
        self, store: CycleStore, kv: InMemoryKeyValueStore, repository: UserRepository
    ) -> None:
        kv.fail_writes = True
        with pytest.raises(PersistenceError):
            store.add_cycle(date(2024, 1, 1))
        kv.fail_writes = False
        store.flush()
        assert store.dirty is False
        assert len(repository.load()[0].cycles) == 1


class TestNotifications:
    def test_listener_receives_committed_events(self, store: CycleStore) -> None:
        events: list[ChangeEvent] = []
        store.subscribe(events.append)
        cycle = store.add_cycle(date(2024, 1, 1))
        store.delete_cycle(cycle.id)
        assert [e.operation for e in events] == ["add_cycle", "delete_cycle"]
        assert events[0].record_id == cycle.id
        assert events[0].user_id == store.current_user.id

    def test_no_event_when_save_fails(
        self, store: CycleStore, kv: InMemoryKeyValueStore
    ) -> None:
        events: list[ChangeEvent] = []
        store.subscribe(events.append)
        kv.fail_writes = True
        with pytest.raises(PersistenceError):
            store.clear_all_data()
        assert events == []

    def test_unsubscribe(self, store: CycleStore) -> None:
        events: list[ChangeEvent] = []
        unsubscribe = store.subscribe(events.append)
        unsubscribe()
        store.add_cycle(date(2024, 1, 1))
        assert events == []

    def test_failing_listener_does_not_block_others(self, store: CycleStore) -> None:
        events: list[ChangeEvent] = []

        def broken(event: ChangeEvent) -> None:
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(events.append)
        store.add_cycle(date(2024, 1, 1))
        assert len(events) == 1
