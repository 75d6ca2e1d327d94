"""Tests for entry naming."""

from datetime import datetime, timedelta, timezone

import pytest

from deary.core.entry import Change
from deary.core.naming import (
    NAME_FORMAT,
    entry_name,
    is_entry_name,
    unique_entry_name,
)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 9, 30, 12, 345678, tzinfo=timezone.utc)


class TestEntryName:
    def test_second_resolution(self, now):
        assert entry_name(now) == "20250115-093012"

    def test_converts_to_utc(self):
        toronto = timezone(timedelta(hours=-5))
        local = datetime(2025, 1, 15, 22, 0, 0, tzinfo=toronto)
        assert entry_name(local) == "20250116-030000"

    def test_defaults_to_current_time(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        name = entry_name()
        after = datetime.now(timezone.utc)
        parsed = datetime.strptime(name, NAME_FORMAT).replace(tzinfo=timezone.utc)
        assert before <= parsed <= after

    def test_sorts_chronologically(self, now):
        later = now + timedelta(seconds=1)
        next_day = now + timedelta(days=1)
        names = [entry_name(next_day), entry_name(now), entry_name(later)]
        assert sorted(names) == [entry_name(now), entry_name(later), entry_name(next_day)]


class TestUniqueEntryName:
    def test_unused_name(self, now):
        assert unique_entry_name({".gpg_id"}, now) == "20250115-093012"

    def test_collision_appends_suffix(self, now):
        assert unique_entry_name({"20250115-093012"}, now) == "20250115-093012-002"

    def test_multiple_collisions(self, now):
        existing = {"20250115-093012", "20250115-093012-002", "20250115-093012-003"}
        assert unique_entry_name(existing, now) == "20250115-093012-004"

    def test_suffixed_names_sort_after_base(self, now):
        first = unique_entry_name(set(), now)
        second = unique_entry_name({first}, now)
        later = entry_name(now + timedelta(seconds=1))
        assert first < second < later

    def test_many_collisions_keep_creation_order(self, now):
        names = []
        for _ in range(12):
            names.append(unique_entry_name(set(names), now))

        assert names[8:10] == ["20250115-093012-009", "20250115-093012-010"]
        assert sorted(names) == names


class TestIsEntryName:
    @pytest.mark.parametrize("name", ["20250115-093012", "20250115-093012-002", "old-entry"])
    def test_entries(self, name):
        assert is_entry_name(name)

    @pytest.mark.parametrize("name", ["", ".gpg_id", ".tmp-abc", "a/b", "..", "x\\y"])
    def test_not_entries(self, name):
        assert not is_entry_name(name)


class TestChange:
    def test_commit_messages(self):
        assert Change.ADD.message("20250115-093012") == "Add 20250115-093012"
        assert Change.EDIT.message("x") == "Edit x"
        assert Change.DELETE.message("x") == "Delete x"
