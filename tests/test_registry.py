from __future__ import annotations

from voicecontrol.enforcement.models import Mutation, SlotKind
from voicecontrol.enforcement.registry import TargetRegistry


def test_new_registry_is_empty():
    registry = TargetRegistry()
    assert registry.is_empty()
    assert all(registry.get(kind) is None for kind in SlotKind)


def test_bind_toggles_same_identity():
    registry = TargetRegistry()

    assert registry.bind(SlotKind.MUTE, 7) == 7
    assert registry.bind(SlotKind.MUTE, 7) is None
    assert registry.get(SlotKind.MUTE) is None
    assert registry.bind(SlotKind.MUTE, 7) == 7
    assert registry.get(SlotKind.MUTE) == 7


def test_bind_other_identity_replaces():
    registry = TargetRegistry()
    registry.bind(SlotKind.DISCONNECT, 1)

    assert registry.bind(SlotKind.DISCONNECT, 2) == 2
    assert registry.get(SlotKind.DISCONNECT) == 2


def test_slots_are_independent():
    registry = TargetRegistry()
    registry.bind(SlotKind.DISCONNECT, 1)
    registry.bind(SlotKind.DEAFEN, 1)
    registry.bind(SlotKind.MUTE, 2)

    assert registry.snapshot() == {SlotKind.DISCONNECT: 1, SlotKind.MUTE: 2, SlotKind.DEAFEN: 1}

    registry.clear(SlotKind.DISCONNECT)
    assert registry.get(SlotKind.DISCONNECT) is None
    assert registry.get(SlotKind.DEAFEN) == 1


def test_snapshot_is_a_copy():
    registry = TargetRegistry()
    registry.bind(SlotKind.MUTE, 3)
    snap = registry.snapshot()

    registry.bind(SlotKind.MUTE, 3)

    assert snap[SlotKind.MUTE] == 3
    assert registry.get(SlotKind.MUTE) is None


def test_load_accepts_string_keys():
    registry = TargetRegistry({"deafen": 9})  # type: ignore[dict-item]

    assert registry.get(SlotKind.DEAFEN) == 9


def test_slot_metadata():
    assert SlotKind.DISCONNECT.config_key == "disconnect_user_id"
    assert SlotKind.MUTE.mutation is Mutation.SET_MUTED
    assert Mutation.FORCE_CHANNEL_NULL.body() == {"channel_id": None}
    assert Mutation.SET_MUTED.body() == {"mute": True}
    assert Mutation.SET_DEAFENED.body() == {"deaf": True}
