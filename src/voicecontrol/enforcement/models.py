from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SlotKind(str, Enum):
    DISCONNECT = "disconnect"
    MUTE = "mute"
    DEAFEN = "deafen"

    @property
    def config_key(self) -> str:
        """Name of the persisted configuration key for this slot."""
        return f"{self.value}_user_id"

    @property
    def label(self) -> str:
        return _SLOT_LABELS[self]

    @property
    def mutation(self) -> "Mutation":
        return _SLOT_MUTATIONS[self]


class Mutation(str, Enum):
    FORCE_CHANNEL_NULL = "force_channel_null"
    SET_MUTED = "set_muted"
    SET_DEAFENED = "set_deafened"

    def body(self) -> dict[str, Any]:
        """JSON body of the member PATCH for this mutation."""
        if self is Mutation.FORCE_CHANNEL_NULL:
            return {"channel_id": None}
        if self is Mutation.SET_MUTED:
            return {"mute": True}
        return {"deaf": True}

    @property
    def success_message(self) -> str:
        return _SUCCESS_MESSAGES[self]


_SLOT_LABELS = {
    SlotKind.DISCONNECT: "Auto-disconnect",
    SlotKind.MUTE: "Auto-mute",
    SlotKind.DEAFEN: "Auto-deafen",
}

_SLOT_MUTATIONS = {
    SlotKind.DISCONNECT: Mutation.FORCE_CHANNEL_NULL,
    SlotKind.MUTE: Mutation.SET_MUTED,
    SlotKind.DEAFEN: Mutation.SET_DEAFENED,
}

_SUCCESS_MESSAGES = {
    Mutation.FORCE_CHANNEL_NULL: "User disconnected from voice",
    Mutation.SET_MUTED: "User server-muted",
    Mutation.SET_DEAFENED: "User server-deafened",
}


class Severity(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class PresenceEvent:
    """One voice-state change for a participant.

    `channel_id` is None when the subject left voice entirely. `is_muted` and
    `is_deafened` are None when the source did not report them.
    """

    subject_id: int
    channel_id: Optional[int] = None
    previous_channel_id: Optional[int] = None
    is_muted: Optional[bool] = None
    is_deafened: Optional[bool] = None


@dataclass(frozen=True)
class GroupContext:
    group_id: Optional[int]

    @property
    def resolved(self) -> bool:
        return self.group_id is not None


@dataclass(frozen=True)
class ActionRequest:
    group_id: int
    subject_id: int
    mutation: Mutation


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    AUTH_UNAVAILABLE = "auth_unavailable"
    NETWORK_FAILURE = "network_failure"


@dataclass(frozen=True)
class DispatchOutcome:
    kind: OutcomeKind
    request: ActionRequest
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


class TransportError(Exception):
    """Raised by a transport when a request got no response at all."""
