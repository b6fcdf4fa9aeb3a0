from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from ..enforcement.models import TransportError

log = logging.getLogger("voicecontrol.rest_transport")


class RestMemberTransport:
    """Guild member PATCH over aiohttp.

    One attempt per call. The session is created lazily and reused; call
    `close()` on shutdown.
    """

    def __init__(
        self,
        *,
        api_base: str,
        timeout_seconds: float = 10.0,
        audit_log_reason: str = "",
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=max(0.1, float(timeout_seconds)))
        self.audit_log_reason = audit_log_reason
        self._session = session
        self._owns_session = session is None

    def member_url(self, group_id: int, subject_id: int) -> str:
        return f"{self.api_base}/guilds/{group_id}/members/{subject_id}"

    def _headers(self, token: str) -> dict[str, str]:
        headers = {"Authorization": token, "Content-Type": "application/json"}
        if self.audit_log_reason:
            headers["X-Audit-Log-Reason"] = quote(self.audit_log_reason, safe=" ")
        return headers

    async def start(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def patch_member(self, group_id: int, subject_id: int, body: dict[str, Any], *, token: str) -> int:
        session = await self.start()
        url = self.member_url(group_id, subject_id)
        try:
            async with session.patch(url, json=body, headers=self._headers(token)) as resp:
                if resp.status >= 400:
                    text = await resp.text()
                    log.debug("PATCH %s -> %s %s", url, resp.status, text[:200])
                return resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
