"""Tests for the one-file-per-record Funko store."""

import json
from dataclasses import replace

import pytest

from funkoshelf.core import record_store
from funkoshelf.core.record_store import FunkoStore, StoreError

TEST_USER = "testUser"


class TestCreateAndRead:

    def test_create_writes_file_per_record(self, store, spider_man):
        assert store.create(TEST_USER, spider_man) is True
        path = store.data_dir / TEST_USER / "1.json"
        assert path.exists()
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["specialFeatures"] == "Glow in the dark"
        assert data["marketValue"] == 29.99
        assert data["type"] == "Pop!"

    def test_create_duplicate_returns_false(self, store, spider_man):
        assert store.create(TEST_USER, spider_man) is True
        other = replace(spider_man, name="Other")
        assert store.create(TEST_USER, other) is False
        assert store.read(TEST_USER, 1).name == "Spider-Man"

    def test_read_round_trip(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        assert store.read(TEST_USER, 1) == spider_man

    def test_read_absent_returns_none(self, store):
        assert store.read(TEST_USER, 999) is None

    def test_read_corrupt_record_raises(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        (store.data_dir / TEST_USER / "1.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            store.read(TEST_USER, 1)

    def test_users_are_isolated(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        assert store.read("someoneElse", 1) is None


class TestUpdateAndDelete:

    def test_update_existing(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        updated = replace(spider_man, market_value=99.5)
        assert store.update(TEST_USER, updated) is True
        assert store.read(TEST_USER, 1).market_value == 99.5

    def test_update_absent_returns_false(self, store, spider_man):
        assert store.update(TEST_USER, spider_man) is False
        assert store.read(TEST_USER, 1) is None

    def test_delete_existing(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        assert store.delete(TEST_USER, 1) is True
        assert store.read(TEST_USER, 1) is None

    def test_delete_absent_returns_false(self, store):
        assert store.delete(TEST_USER, 1) is False


class TestList:

    def test_list_empty_user(self, store):
        assert store.list(TEST_USER) == []

    def test_list_sorted_by_id(self, store, spider_man):
        for funko_id in (5, 1, 3):
            store.create(TEST_USER, replace(spider_man, id=funko_id))
        assert [f.id for f in store.list(TEST_USER)] == [1, 3, 5]

    def test_list_sorts_numerically(self, store, spider_man):
        for funko_id in (10, 2):
            store.create(TEST_USER, replace(spider_man, id=funko_id))
        assert [f.id for f in store.list(TEST_USER)] == [2, 10]

    def test_list_skips_corrupt_and_foreign_files(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        user_dir = store.data_dir / TEST_USER
        (user_dir / "7.json").write_text("garbage", encoding="utf-8")
        (user_dir / "notes.txt").write_text("ignored", encoding="utf-8")
        assert store.list(TEST_USER) == [spider_man]


class TestUserNames:

    @pytest.mark.parametrize("user", ["..", ".", "a/b", "", "../etc"])
    def test_rejects_unsafe_user(self, store, user):
        with pytest.raises(ValueError):
            store.user_dir(user)

    def test_default_data_dir_from_config(self):
        from funkoshelf.config import DATA_DIR

        assert FunkoStore().data_dir == DATA_DIR


class TestFailedWrites:

    def test_unencodable_update_keeps_original(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        with pytest.raises(StoreError):
            store.update(TEST_USER, replace(spider_man, name="\ud800"))
        assert store.read(TEST_USER, 1) == spider_man

    def test_unencodable_create_leaves_no_file(self, store, spider_man):
        with pytest.raises(StoreError):
            store.create(TEST_USER, replace(spider_man, name="\ud800"))
        assert not (store.data_dir / TEST_USER / "1.json").exists()
        assert store.list(TEST_USER) == []
        assert store.create(TEST_USER, spider_man) is True

    def test_failed_replace_keeps_original(self, store, spider_man, monkeypatch):
        store.create(TEST_USER, spider_man)

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(record_store.os, "replace", failing_replace)
        with pytest.raises(StoreError):
            store.update(TEST_USER, replace(spider_man, market_value=1.0))
        assert store.read(TEST_USER, 1) == spider_man
        assert list((store.data_dir / TEST_USER).iterdir()) == [store.data_dir / TEST_USER / "1.json"]

    def test_failed_link_leaves_no_file(self, store, spider_man, monkeypatch):
        def failing_link(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(record_store.os, "link", failing_link)
        with pytest.raises(StoreError):
            store.create(TEST_USER, spider_man)
        assert list((store.data_dir / TEST_USER).iterdir()) == []
        assert store.read(TEST_USER, 1) is None

    def test_temp_files_not_listed(self, store, spider_man):
        store.create(TEST_USER, spider_man)
        store.update(TEST_USER, replace(spider_man, name="Venom"))
        names = [p.name for p in (store.data_dir / TEST_USER).iterdir()]
        assert names == ["1.json"]
        assert [f.name for f in store.list(TEST_USER)] == ["Venom"]
