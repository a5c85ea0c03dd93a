"""Retry helper tests for concurrent insert-or-update writes."""

import pytest
from sqlalchemy.exc import IntegrityError

from lottodesk.services.concurrency import run_upsert


def _unique_violation():
    return IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))


def test_run_upsert_reruns_once_after_unique_violation(db_session):
    calls = []

    def write():
        calls.append(1)
        if len(calls) == 1:
            raise _unique_violation()
        return "updated"

    assert run_upsert(write) == "updated"
    assert len(calls) == 2


def test_run_upsert_propagates_repeated_violation(db_session):
    calls = []

    def write():
        calls.append(1)
        raise _unique_violation()

    with pytest.raises(IntegrityError):
        run_upsert(write)
    assert len(calls) == 2
