from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

from ..enforcement.models import Mutation, Severity, TransportError


class FakeDirectory:
    """Directory backed by a plain channel -> guild mapping."""

    def __init__(self, channels: Optional[dict[int, int]] = None) -> None:
        self.channels = dict(channels or {})
        self.lookups: list[int] = []

    def resolve_group(self, channel_id: int) -> Optional[int]:
        self.lookups.append(channel_id)
        return self.channels.get(channel_id)


class FakePermissionOracle:
    def __init__(self, allowed: bool = True) -> None:
        self.allowed = allowed
        self.checks: list[tuple[Optional[int], int]] = []

    def can_manage_voice(self, acting_identity: Optional[int], channel_id: int) -> bool:
        self.checks.append((acting_identity, channel_id))
        return self.allowed


class FakeCredentialProvider:
    def __init__(self, token: Optional[str] = "Bot test-token") -> None:
        self.token = token

    def current_token(self) -> Optional[str]:
        return self.token


@dataclass(frozen=True)
class PatchCall:
    group_id: int
    subject_id: int
    body: dict[str, Any]
    token: str


class FakeTransport:
    """Records member PATCHes.

    `statuses` maps a body key ("channel_id", "mute", "deaf") to the status to
    return; keys listed in `fail_keys` raise `TransportError` instead.
    """

    def __init__(
        self,
        *,
        default_status: int = 200,
        statuses: Optional[dict[str, int]] = None,
        fail_keys: Optional[set[str]] = None,
    ) -> None:
        self.default_status = default_status
        self.statuses = dict(statuses or {})
        self.fail_keys = set(fail_keys or ())
        self.calls: list[PatchCall] = []

    async def patch_member(self, group_id: int, subject_id: int, body: dict[str, Any], *, token: str) -> int:
        self.calls.append(PatchCall(group_id, subject_id, dict(body), token))
        await asyncio.sleep(0)
        key = next(iter(body))
        if key in self.fail_keys:
            raise TransportError("connection reset")
        return self.statuses.get(key, self.default_status)

    def bodies(self) -> list[dict[str, Any]]:
        return [c.body for c in self.calls]

    def calls_for(self, mutation: Mutation) -> list[PatchCall]:
        return [c for c in self.calls if c.body == mutation.body()]


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, Severity]] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.messages.append((message, severity))

    def by_severity(self, severity: Severity) -> list[str]:
        return [m for m, s in self.messages if s is severity]
