"""
Collaborator contracts consumed by the enforcement engine.

The engine depends on exactly these; concrete discord.py / aiohttp backed
implementations live in `voicecontrol.services`, fakes in
`voicecontrol.testing.fakes`.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from .models import Severity


@runtime_checkable
class Directory(Protocol):
    """Resolves a voice channel to the guild that owns it."""

    def resolve_group(self, channel_id: int) -> Optional[int]:
        ...


@runtime_checkable
class PermissionOracle(Protocol):
    """Can the acting identity move/mute/deafen members in this channel's guild?"""

    def can_manage_voice(self, acting_identity: Optional[int], channel_id: int) -> bool:
        ...


@runtime_checkable
class CredentialProvider(Protocol):
    def current_token(self) -> Optional[str]:
        ...


@runtime_checkable
class MutationTransport(Protocol):
    async def patch_member(self, group_id: int, subject_id: int, body: dict[str, Any], *, token: str) -> int:
        """Send one member PATCH and return the HTTP status.

        Raises `TransportError` when no response was received.
        """
        ...


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, message: str, severity: Severity) -> None:
        ...
