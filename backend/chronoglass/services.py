from __future__ import annotations

from typing import List

from fastapi import HTTPException, status

from .schemas import AppData, SubActivity, WorkSession, new_id
from .store import SessionStore, StoreWriteError
from .utils import date_key_from_millis, in_date_range, iso_week_of, now_millis


def _write_failed() -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to write data")


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------
def get_all(store: SessionStore) -> AppData:
    return store.load()


def list_sessions_for_day(store: SessionStore, day: str) -> List[WorkSession]:
    return [session for session in store.load().sessions if session.date == day]


def list_sessions_for_week(store: SessionStore, year: int, week: int) -> List[WorkSession]:
    return [session for session in store.load().sessions if iso_week_of(session.date) == (year, week)]


# ----------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------
def close_open_sessions(data: AppData, closed_at: int) -> List[WorkSession]:
    """Stop every running session and its running sub-activities at ``closed_at``."""
    closed: List[WorkSession] = []
    for session in data.sessions:
        if session.end_time is not None:
            continue
        session.end_time = closed_at
        for activity in session.sub_activities:
            if activity.end_time is None:
                activity.end_time = closed_at
        closed.append(session)
    return closed


def start_new_session(store: SessionStore, title: str, start_time: int) -> WorkSession:
    try:
        day = date_key_from_millis(start_time)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid startTime") from exc
    session = WorkSession(
        id=new_id(),
        start_time=start_time,
        end_time=None,
        date=day,
        sub_activities=[SubActivity(id=new_id(), title=title, start_time=start_time, end_time=None)],
    )
    try:
        with store.transaction() as data:
            # prior sessions close "now", never at the (possibly backdated) start
            close_open_sessions(data, now_millis())
            data.sessions.append(session)
    except StoreWriteError as exc:
        raise _write_failed() from exc
    return session


def append_session(store: SessionStore, session: WorkSession) -> WorkSession:
    try:
        with store.transaction() as data:
            data.sessions = [existing for existing in data.sessions if existing.id != session.id]
            data.sessions.append(session)
    except StoreWriteError as exc:
        raise _write_failed() from exc
    return session


def overwrite_all(store: SessionStore, data: AppData) -> None:
    try:
        with store.lock:
            store.save(data)
    except StoreWriteError as exc:
        raise _write_failed() from exc


# ----------------------------------------------------------------------
# Deletion
# ----------------------------------------------------------------------
def clear_all(store: SessionStore) -> None:
    try:
        with store.transaction() as data:
            data.sessions = []
    except StoreWriteError as exc:
        raise _write_failed() from exc


def clear_day(store: SessionStore, day: str) -> None:
    try:
        with store.transaction() as data:
            data.sessions = [session for session in data.sessions if session.date != day]
    except StoreWriteError as exc:
        raise _write_failed() from exc


def clear_range(store: SessionStore, start: str, end: str) -> None:
    try:
        with store.transaction() as data:
            data.sessions = [
                session for session in data.sessions if not in_date_range(session.date, start, end)
            ]
    except StoreWriteError as exc:
        raise _write_failed() from exc
