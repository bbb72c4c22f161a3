"""HTTP-Client für die ChronoGlass API."""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote, urljoin

import requests

from .models import WorkSession


class ApiError(RuntimeError):
    """Fehler beim Zugriff auf die API."""

    def __init__(self, message: str, *, response: Optional[requests.Response] = None) -> None:
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None


class ApiClient:
    """Kapselt HTTP-Aufrufe zur lokalen ChronoGlass API."""

    def __init__(self, base_url: str, timeout: int = 15) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Hilfsfunktionen
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, **kwargs):
        url = urljoin(self.base_url, path.lstrip("/"))
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.setdefault("headers", {})
        headers.update({"Accept": "application/json"})
        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as exc:  # pragma: no cover - Netzwerkfehler
            raise ApiError(str(exc)) from exc

        if response.status_code >= 400:
            raise ApiError(f"API Fehler {response.status_code}: {response.text}", response=response)

        if response.headers.get("Content-Type", "").startswith("application/json"):
            return response.json()
        return response.content

    # ------------------------------------------------------------------
    # Abfragen
    # ------------------------------------------------------------------
    def get_data(self) -> Dict[str, Any]:
        return self._request("GET", "/data") or {}

    def get_day(self, day: str) -> list[WorkSession]:
        data = self._request("GET", f"/data/day/{quote(day, safe='')}") or []
        return [WorkSession.from_dict(item) for item in data]

    def get_week(self, year: int, week: int) -> list[WorkSession]:
        data = self._request("GET", f"/data/week/{year}/{week}") or []
        return [WorkSession.from_dict(item) for item in data]

    # ------------------------------------------------------------------
    # Änderungen
    # ------------------------------------------------------------------
    def start_session(self, title: str, start_time: int) -> str:
        """Startet eine neue Sitzung und liefert deren ID."""
        data = self._request("POST", "/data/start", json={"title": title, "startTime": start_time}) or {}
        return data.get("id", "")

    def append_session(self, session: WorkSession) -> None:
        self._request("POST", "/data/append", json=session.to_dict())

    def overwrite(self, document: Dict[str, Any]) -> None:
        self._request("POST", "/data/overwrite", json=document)

    def clear_all(self) -> None:
        self._request("DELETE", "/data/all")

    def clear_day(self, day: str) -> None:
        self._request("DELETE", f"/data/day/{quote(day, safe='')}")

    def clear_range(self, start: str, end: str) -> None:
        self._request("DELETE", "/data/range", params={"start": start, "end": end})


__all__ = ["ApiClient", "ApiError"]
