from __future__ import annotations

import asyncio

from voicecontrol.database import initialize_database
from voicecontrol.enforcement.models import SlotKind
from voicecontrol.enforcement.registry import TargetRegistry
from voicecontrol.services.target_store import WatchedTargetStore


def test_save_and_load_roundtrip(tmp_path):
    path = str(tmp_path / "vc.sqlite3")

    async def scenario():
        store = WatchedTargetStore(path)
        await initialize_database(path, [store])
        await store.save(SlotKind.MUTE, 11, updated_by_user_id=1)
        await store.save(SlotKind.DEAFEN, 12)
        await store.save(SlotKind.DEAFEN, None)
        return await store.load_all()

    stored = asyncio.run(scenario())

    assert stored == {SlotKind.MUTE: 11, SlotKind.DEAFEN: None}


def test_hydrate_uses_seeds_only_for_unsaved_slots(tmp_path):
    path = str(tmp_path / "vc.sqlite3")

    async def scenario():
        store = WatchedTargetStore(path)
        await store.init()
        await store.save(SlotKind.MUTE, None)
        return await store.hydrate({SlotKind.MUTE: 5, SlotKind.DISCONNECT: 6, SlotKind.DEAFEN: None})

    values = asyncio.run(scenario())

    assert values == {SlotKind.DISCONNECT: 6, SlotKind.MUTE: None, SlotKind.DEAFEN: None}
    registry = TargetRegistry(values)
    assert registry.get(SlotKind.DISCONNECT) == 6


def test_store_survives_reopen(tmp_path):
    path = str(tmp_path / "vc.sqlite3")

    async def write():
        store = WatchedTargetStore(path)
        await store.init()
        await store.save(SlotKind.DISCONNECT, 77)

    async def read():
        store = WatchedTargetStore(path)
        await store.init()
        return await store.load_all()

    asyncio.run(write())
    assert asyncio.run(read()) == {SlotKind.DISCONNECT: 77}
