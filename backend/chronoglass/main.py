from __future__ import annotations

import json
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, Query, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from . import services
from .config import settings
from .host import HostBridge
from .middleware import LoopbackOnlyMiddleware
from .schemas import AppData, StartSessionRequest, WorkSession
from .state import ChangeNotifier
from .store import SessionStore

notifier = ChangeNotifier()
session_store = SessionStore(settings.data_path, notifier)
host_bridge = HostBridge(session_store)


def get_store() -> SessionStore:
    return session_store


class EscapedJSONResponse(JSONResponse):
    """JSON response that escapes non-ASCII, so lone surrogates in stored text still encode."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, allow_nan=False, separators=(",", ":")).encode("ascii")


app = FastAPI(title=settings.app_name, default_response_class=EscapedJSONResponse)
app.add_middleware(LoopbackOnlyMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/data", response_model=AppData)
def get_all_data(store: SessionStore = Depends(get_store)) -> AppData:
    return services.get_all(store)


@app.get("/data/day/{date}", response_model=List[WorkSession])
def get_day_data(date: str, store: SessionStore = Depends(get_store)) -> List[WorkSession]:
    return services.list_sessions_for_day(store, date)


@app.get("/data/week/{year}/{week}", response_model=List[WorkSession])
def get_week_data(year: int, week: int, store: SessionStore = Depends(get_store)) -> List[WorkSession]:
    return services.list_sessions_for_week(store, year, week)


@app.post("/data/start", status_code=status.HTTP_201_CREATED)
def start_new_session(payload: StartSessionRequest, store: SessionStore = Depends(get_store)) -> Dict[str, str]:
    session = services.start_new_session(store, payload.title, payload.start_time)
    return {"status": "ok", "id": session.id}


@app.post("/data/append", status_code=status.HTTP_201_CREATED)
def append_session(payload: WorkSession, store: SessionStore = Depends(get_store)) -> Dict[str, str]:
    services.append_session(store, payload)
    return {"status": "ok", "id": payload.id}


@app.post("/data/overwrite")
def overwrite_all(payload: AppData, store: SessionStore = Depends(get_store)) -> Dict[str, str]:
    services.overwrite_all(store, payload)
    return {"status": "ok"}


@app.delete("/data/all")
def clear_all(store: SessionStore = Depends(get_store)) -> Dict[str, str]:
    services.clear_all(store)
    return {"status": "ok"}


@app.delete("/data/day/{date}")
def clear_day(date: str, store: SessionStore = Depends(get_store)) -> Dict[str, str]:
    services.clear_day(store, date)
    return {"status": "ok"}


@app.delete("/data/range")
def clear_range(
    start: str = Query(...),
    end: str = Query(...),
    store: SessionStore = Depends(get_store),
) -> Dict[str, str]:
    services.clear_range(store, start, end)
    return {"status": "ok"}
