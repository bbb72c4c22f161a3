from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from chronoglass.main import app, get_store
from chronoglass.schemas import SubActivity, WorkSession, new_id
from chronoglass.state import ChangeNotifier
from chronoglass.store import SessionStore

# 2024-06-01T10:00:00Z
JUNE_FIRST_MS = 1717236000000


@pytest.fixture()
def data_path(tmp_path: Path) -> Path:
    return tmp_path / "ChronoGlass" / "data.json"


@pytest.fixture()
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture()
def store(data_path: Path, notifier: ChangeNotifier) -> SessionStore:
    return SessionStore(data_path, notifier)


@pytest.fixture()
def client(store: SessionStore) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_session() -> Callable[..., WorkSession]:
    def factory(
        date: str = "2024-06-01",
        start_time: int = JUNE_FIRST_MS,
        end_time: Optional[int] = JUNE_FIRST_MS + 3_600_000,
        titles: Optional[List[str]] = None,
        session_id: Optional[str] = None,
    ) -> WorkSession:
        activities = [
            SubActivity(id=new_id(), title=title, start_time=start_time, end_time=end_time)
            for title in (titles or ["Work"])
        ]
        return WorkSession(
            id=session_id or new_id(),
            start_time=start_time,
            end_time=end_time,
            date=date,
            sub_activities=activities,
        )

    return factory
