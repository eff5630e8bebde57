"""Shared fixtures: a seeded in-memory site."""

from __future__ import annotations

import time

import pytest

from fakes import FakeDatabase

DAY = 24 * 60 * 60

TEACHER = 42


@pytest.fixture
def now() -> int:
    return int(time.time())


@pytest.fixture
def empty_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def site_db(now: int) -> FakeDatabase:
    """A small site where user 42 teaches four courses and studies in one."""
    db = FakeDatabase()
    db.roles.insert_many([
        {"id": 3, "shortname": "editingteacher"},
        {"id": 4, "shortname": "teacher"},
        {"id": 5, "shortname": "student"},
    ])
    db.courses.insert_many([
        {"id": 1, "fullname": "Front page", "shortname": "site", "startdate": 0, "enddate": 0,
         "visible": 1, "enablecompletion": 0},
        {"id": 10, "fullname": "Python Basics", "shortname": "PY101", "startdate": now - 10 * DAY,
         "enddate": now + 60 * DAY, "visible": 1, "enablecompletion": 1},
        {"id": 11, "fullname": "Data Science", "shortname": "DS200", "startdate": now - 200 * DAY,
         "enddate": now - 20 * DAY, "visible": 0, "enablecompletion": 0},
        {"id": 12, "fullname": "Advanced Rust", "shortname": "RS300", "startdate": now + 30 * DAY,
         "enddate": 0, "visible": 1, "enablecompletion": 0},
        {"id": 13, "fullname": "My ePortfolio space", "shortname": "EP1", "startdate": now - 5 * DAY,
         "enddate": 0, "visible": 1, "enablecompletion": 0},
        {"id": 14, "fullname": "Machine Learning", "shortname": "ML400", "startdate": now - 100 * DAY,
         "enddate": 0, "visible": 1, "enablecompletion": 1},
    ])
    db.role_assignments.insert_many(
        [{"userid": TEACHER, "courseid": cid, "roleid": 3} for cid in (1, 10, 11, 12, 13)]
        + [
            {"userid": TEACHER, "courseid": 10, "roleid": 4},
            {"userid": TEACHER, "courseid": 14, "roleid": 5},
            {"userid": 100, "courseid": 10, "roleid": 5},
            {"userid": 101, "courseid": 10, "roleid": 5},
            {"userid": 102, "courseid": 11, "roleid": 5},
            {"userid": 103, "courseid": 14, "roleid": 5},
        ]
    )
    db.groups.insert_many([
        {"id": 7, "courseid": 14, "name": "Group A"},
        {"id": 9, "courseid": 14, "name": "Group B"},
        {"id": 20, "courseid": 10, "name": "Morning"},
    ])
    db.groups_members.insert_many([
        {"groupid": 7, "userid": TEACHER},
        {"groupid": 20, "userid": TEACHER},
        {"groupid": 9, "userid": 103},
    ])
    db.course_modules.insert_many([
        {"id": 140, "course": 14, "completion": 1, "visible": 1, "availability": None},
        {"id": 141, "course": 14, "completion": 2, "visible": 1,
         "availability": '{"op":"&","c":[{"type":"group","id":9}],"showc":[true]}'},
        {"id": 142, "course": 14, "completion": 2, "visible": 1,
         "availability": '{"op":"&","c":[{"type":"group","id":7}],"showc":[true]}'},
        {"id": 143, "course": 14, "completion": 1, "visible": 1, "availability": '{"op":"&","c":[{"type":'},
        {"id": 144, "course": 14, "completion": 0, "visible": 1, "availability": None},
        {"id": 145, "course": 14, "completion": 1, "visible": 0, "availability": None},
        {"id": 146, "course": 14, "completion": 1, "visible": 1, "deletioninprogress": 1, "availability": None},
        {"id": 147, "course": 14, "completion": 1, "visible": 1,
         "availability": '{"op":"&","c":[{"type":"date","d":">=","t":1700000000}],"showc":[true]}'},
    ])
    db.course_modules_completion.insert_many([
        {"coursemoduleid": 140, "userid": TEACHER, "completionstate": 1},
        {"coursemoduleid": 141, "userid": TEACHER, "completionstate": 1},
        {"coursemoduleid": 142, "userid": TEACHER, "completionstate": 2},
        {"coursemoduleid": 147, "userid": TEACHER, "completionstate": 3},
        {"coursemoduleid": 143, "userid": 103, "completionstate": 1},
    ])
    return db
