"""Tests for the HistoryStore — bounded, most-recent-first, whole-file JSON."""

from __future__ import annotations

import json
import multiprocessing
import os
import stat
from pathlib import Path

import pytest

import buildtracker.core.history_store as history_store_module
from buildtracker.core.errors import CorruptDataError, StorageError
from buildtracker.core.history_store import HistoryStore
from buildtracker.models.builds import BuildRecord, HistoryDocument


class TestEnsureExists:
    def test_creates_parents_and_empty_document(self, store: HistoryStore, history_path: Path):
        assert not history_path.parent.exists()
        store.ensure_exists()
        assert history_path.exists()
        assert json.loads(history_path.read_text(encoding="utf-8")) == {"builds": []}

    def test_idempotent(self, store: HistoryStore, history_path: Path):
        store.ensure_exists()
        first = history_path.read_text(encoding="utf-8")
        store.ensure_exists()
        assert history_path.read_text(encoding="utf-8") == first

    def test_does_not_reset_existing_history(self, store: HistoryStore, make_record):
        store.append(make_record())
        store.ensure_exists()
        assert store.count() == 1

    def test_uncreatable_directory_raises_storage_error(self, tmp_dir: Path):
        blocker = tmp_dir / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = HistoryStore(blocker / "build-history.json")
        with pytest.raises(StorageError):
            store.ensure_exists()

    def test_load_creates_file_lazily(self, store: HistoryStore, history_path: Path):
        document = store.load()
        assert document.builds == []
        assert history_path.exists()


class TestSaveAndLoad:
    def test_save_is_pretty_printed(self, store: HistoryStore, history_path: Path, make_record):
        store.ensure_exists()
        store.save(HistoryDocument(builds=[make_record()]))
        text = history_path.read_text(encoding="utf-8")
        assert text.startswith("{\n")
        assert '\n  "builds": [' in text

    def test_absent_optional_fields_are_null(self, store: HistoryStore, history_path: Path, make_record):
        store.append(make_record())
        raw = json.loads(history_path.read_text(encoding="utf-8"))["builds"][0]
        assert raw["duration_minutes"] is None
        assert raw["commit_hash"] is None
        assert raw["repo_url"] is None
        assert raw["resource_usage"]["end"] is None

    def test_save_leaves_no_temp_files(self, store: HistoryStore, history_path: Path, make_record):
        store.append(make_record())
        store.append(make_record())
        leftovers = [p.name for p in history_path.parent.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    def test_round_trip_preserves_records(self, store: HistoryStore, make_record):
        record = make_record(duration_minutes=12.5, notes="nightly")
        store.append(record)
        assert store.load().builds == [record]

    def test_free_text_status_round_trips(self, store: HistoryStore, make_record):
        store.append(make_record(status="queued"))
        loaded = store.load().builds[0]
        assert loaded.status == "queued"
        assert loaded.known_status is None

    def test_unknown_keys_survive_append(self, store: HistoryStore, history_path: Path, make_record):
        history_path.parent.mkdir(parents=True)
        legacy = make_record(project="legacy").model_dump(mode="json")
        legacy["runner"] = "ci-7"
        history_path.write_text(json.dumps({"builds": [legacy]}), encoding="utf-8")

        store.append(make_record(project="fresh"))

        raw = json.loads(history_path.read_text(encoding="utf-8"))["builds"]
        assert [b["project"] for b in raw] == ["fresh", "legacy"]
        assert raw[1]["runner"] == "ci-7"


class TestCorruptData:
    """Malformed content is surfaced, never silently reset."""

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    def test_invalid_json_raises(self, store: HistoryStore, history_path: Path):
        self._write(history_path, "{not json")
        with pytest.raises(CorruptDataError):
            store.load()

    def test_file_left_untouched(self, store: HistoryStore, history_path: Path, make_record):
        self._write(history_path, "{not json")
        with pytest.raises(CorruptDataError):
            store.append(make_record())
        assert history_path.read_text(encoding="utf-8") == "{not json"

    def test_wrong_top_level_shape_raises(self, store: HistoryStore, history_path: Path):
        self._write(history_path, "[]")
        with pytest.raises(CorruptDataError):
            store.load()

    def test_missing_builds_key_raises(self, store: HistoryStore, history_path: Path):
        self._write(history_path, '{"runs": []}')
        with pytest.raises(CorruptDataError):
            store.load()

    def test_malformed_record_raises(self, store: HistoryStore, history_path: Path):
        self._write(history_path, '{"builds": [{"id": "build-1"}]}')
        with pytest.raises(CorruptDataError):
            store.load()

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_duration_raises(
        self, store: HistoryStore, history_path: Path, make_record, literal: str
    ):
        record = make_record(duration_minutes=5).model_dump(mode="json")
        text = json.dumps({"builds": [record]}).replace(
            '"duration_minutes": 5.0', f'"duration_minutes": {literal}'
        )
        assert literal in text
        self._write(history_path, text)
        with pytest.raises(CorruptDataError):
            store.load()
        assert history_path.read_text(encoding="utf-8") == text

    def test_error_carries_path(self, store: HistoryStore, history_path: Path):
        self._write(history_path, "garbage")
        with pytest.raises(CorruptDataError) as excinfo:
            store.load()
        assert excinfo.value.path == history_path


class TestAppend:
    def test_append_returns_record_unchanged(self, store: HistoryStore, make_record):
        record = make_record()
        assert store.append(record) is record

    def test_newest_first(self, store: HistoryStore, make_record):
        first = store.append(make_record(project="first"))
        second = store.append(make_record(project="second"))
        assert store.load().builds == [second, first]

    def test_bounded_at_one_hundred(self, store: HistoryStore, make_record):
        appended = [store.append(make_record(project=f"p{i}")) for i in range(105)]
        builds = store.load().builds
        assert len(builds) == 100
        assert builds == list(reversed(appended))[:100]
        assert builds[0].project == "p104"
        assert builds[-1].project == "p5"

    def test_exactly_at_cap_keeps_everything(self, store: HistoryStore, make_record):
        for i in range(100):
            store.append(make_record(project=f"p{i}"))
        assert store.count() == 100
        assert store.load().builds[-1].project == "p0"

    def test_custom_cap(self, history_path: Path, make_record):
        store = HistoryStore(history_path, max_history=3)
        for i in range(5):
            store.append(make_record(project=f"p{i}"))
        assert [b.project for b in store.load().builds] == ["p4", "p3", "p2"]

    def test_invalid_cap_rejected(self, history_path: Path):
        with pytest.raises(ValueError):
            HistoryStore(history_path, max_history=0)

    def test_lock_file_beside_history(self, store: HistoryStore, history_path: Path, make_record):
        store.append(make_record())
        assert (history_path.parent / "build-history.json.lock").exists()


def _append_many(path: str, worker: int, count: int) -> None:
    store = HistoryStore(Path(path))
    for i in range(count):
        store.append(BuildRecord(project=f"w{worker}-{i}", status="success"))


class TestConcurrentAppend:
    """Separate processes appending to one file never lose updates."""

    def _run_workers(self, history_path: Path, workers: int, per_worker: int) -> None:
        ctx = multiprocessing.get_context("fork")
        with ctx.Pool(workers) as pool:
            pool.starmap(
                _append_many,
                [(str(history_path), w, per_worker) for w in range(workers)],
            )

    def test_no_lost_updates(self, store: HistoryStore, history_path: Path):
        self._run_workers(history_path, workers=4, per_worker=15)

        projects = [b.project for b in store.load().builds]
        assert len(projects) == 60
        assert set(projects) == {f"w{w}-{i}" for w in range(4) for i in range(15)}

    def test_each_worker_keeps_its_own_order(self, store: HistoryStore, history_path: Path):
        self._run_workers(history_path, workers=3, per_worker=10)

        projects = [b.project for b in store.load().builds]
        for w in range(3):
            mine = [p for p in projects if p.startswith(f"w{w}-")]
            assert mine == [f"w{w}-{i}" for i in reversed(range(10))]

    def test_bounded_under_contention(self, store: HistoryStore, history_path: Path):
        self._run_workers(history_path, workers=4, per_worker=30)
        assert store.count() == min(4 * 30, store.max_history)


class TestStorageFailures:
    def test_failed_replace_keeps_previous_document(
        self, store: HistoryStore, history_path: Path, make_record, monkeypatch
    ):
        store.append(make_record(project="kept"))
        before = history_path.read_text(encoding="utf-8")

        def _refuse(src, dst):
            raise PermissionError(13, "Permission denied", str(dst))

        monkeypatch.setattr(history_store_module.os, "replace", _refuse)

        with pytest.raises(StorageError) as excinfo:
            store.append(make_record(project="lost"))
        assert excinfo.value.path == history_path

        monkeypatch.undo()
        assert history_path.read_text(encoding="utf-8") == before
        assert [p.name for p in history_path.parent.iterdir() if p.suffix == ".tmp"] == []

    def test_failed_replace_on_save(
        self, store: HistoryStore, history_path: Path, make_record, monkeypatch
    ):
        store.ensure_exists()

        def _refuse(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(history_store_module.os, "replace", _refuse)
        with pytest.raises(StorageError):
            store.save(HistoryDocument(builds=[make_record()]))
        monkeypatch.undo()

        assert json.loads(history_path.read_text(encoding="utf-8")) == {"builds": []}
        assert [p.name for p in history_path.parent.iterdir() if p.suffix == ".tmp"] == []

    def test_unreadable_history_raises_storage_error(
        self, store: HistoryStore, history_path: Path
    ):
        history_path.mkdir(parents=True)
        with pytest.raises(StorageError):
            store.load()


class TestFileMode:
    def test_existing_mode_preserved(self, store: HistoryStore, history_path: Path, make_record):
        store.ensure_exists()
        os.chmod(history_path, 0o640)
        store.append(make_record())
        assert stat.S_IMODE(history_path.stat().st_mode) == 0o640

    def test_new_file_follows_umask(self, store: HistoryStore, history_path: Path):
        previous = os.umask(0o022)
        try:
            store.ensure_exists()
        finally:
            os.umask(previous)
        assert stat.S_IMODE(history_path.stat().st_mode) == 0o644
