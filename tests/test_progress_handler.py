"""
Test ProgressStore semantics trên fake MongoDB
"""

import pytest

from wattpad_archiver.exceptions import PersistenceError
from wattpad_archiver.handlers.progress_handler import ProgressStore

from fakes import FakeDatabase


def make_store():
    db = FakeDatabase()
    return ProgressStore(db), db


def test_report_progress_upserts_record():
    store, db = make_store()

    store.report_progress("story-1", 1, 3)
    store.report_progress("story-1", 2, 3)

    progress = store.get_progress("story-1")
    assert progress["current"] == 2
    assert progress["total"] == 3
    assert isinstance(progress["timestamp"], int)
    assert len(db["progress"].docs) == 1


def test_report_error_sets_flags_and_clears_progress():
    store, db = make_store()
    store.report_progress("story-1", 1, 3)

    store.report_error("story-1")

    assert db["error"].find_one({"_id": "story-1"})["errorFound"] is True
    assert db["queue"].find_one({"_id": "story-1"})["toDelete"] is True
    assert store.get_progress("story-1") == {"current": None, "total": None, "timestamp": None}


def test_report_error_is_idempotent():
    once_store, once_db = make_store()
    twice_store, twice_db = make_store()

    once_store.report_error("story-1")
    twice_store.report_error("story-1")
    twice_store.report_error("story-1")

    for name in ("error", "queue", "progress"):
        assert once_db[name].docs == twice_db[name].docs


def test_report_success_leaves_error_flag_untouched():
    store, db = make_store()
    store.report_progress("story-1", 3, 3)

    store.report_success("story-1")

    status = store.get_status("story-1")
    assert status["error"] is False
    assert status["queue"] is True
    assert status["progress"]["current"] is None
    assert db["error"].docs == {}


def test_report_success_keeps_prior_error_value():
    store, db = make_store()
    store.report_error("story-1")

    store.report_success("story-1")

    assert store.get_status("story-1")["error"] is True


def test_save_story_and_get_story():
    store, _ = make_store()
    story = {"title": "T", "author": "A", "pages": [["<p>x</p>"]], "summary": "S", "url": "u", "timestamp": 1}

    assert store.save_story("story-1", story) == "story-1"
    assert store.get_story("story-1") == story
    assert store.get_status("story-1")["completed"] is True


def test_save_story_requires_full_document():
    store, _ = make_store()

    with pytest.raises(ValueError):
        store.save_story("story-1", {"title": "T"})


def test_find_live_jobs_newest_first():
    store, db = make_store()
    db["progress"].insert({"_id": "old", "current": 1, "total": 5, "timestamp": 100})
    db["progress"].insert({"_id": "new", "current": 2, "total": 5, "timestamp": 300})
    db["progress"].insert({"_id": "mid", "current": 4, "total": 5, "timestamp": 200})
    db["progress"].insert({"_id": "done", "current": None, "total": None, "timestamp": None})

    assert store.find_live_jobs() == ["new", "mid", "old"]
    assert store.find_live_jobs(limit=1) == ["new"]


def test_store_errors_become_persistence_errors():
    store, db = make_store()
    db["progress"].fail = True

    with pytest.raises(PersistenceError):
        store.report_progress("story-1", 1, 3)
    with pytest.raises(PersistenceError):
        store.find_live_jobs()


def test_status_of_unknown_job():
    store, _ = make_store()

    assert store.get_status("nope") == {"progress": None, "error": False, "queue": False, "completed": False}
