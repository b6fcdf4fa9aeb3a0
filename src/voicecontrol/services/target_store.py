from __future__ import annotations

from datetime import datetime, timezone
from typing import Mapping, Optional

import aiosqlite

from ..enforcement.models import SlotKind
from .base import BaseService


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class WatchedTargetStore(BaseService):
    """Persists the watched slots as named configuration keys.

    One row per key (`disconnect_user_id`, `mute_user_id`, `deafen_user_id`).
    A NULL `user_id` means the slot was explicitly cleared.
    """

    async def _create_tables(self, db: aiosqlite.Connection) -> None:
        await db.execute(
            """
            CREATE TABLE IF NOT EXISTS watched_targets (
              config_key TEXT PRIMARY KEY,
              user_id INTEGER,
              updated_at_iso TEXT NOT NULL,
              updated_by_user_id INTEGER
            )
            """
        )

    async def load_all(self) -> dict[SlotKind, Optional[int]]:
        """Return the stored value for every slot that has a row."""
        by_key = {kind.config_key: kind for kind in SlotKind}
        out: dict[SlotKind, Optional[int]] = {}
        async with aiosqlite.connect(self._path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute("SELECT config_key, user_id FROM watched_targets") as cur:
                async for row in cur:
                    kind = by_key.get(str(row["config_key"]))
                    if kind is None:
                        self._logger.warning("Ignoring unknown config key %r", row["config_key"])
                        continue
                    out[kind] = int(row["user_id"]) if row["user_id"] is not None else None
        return out

    async def save(self, slot: SlotKind, user_id: Optional[int], *, updated_by_user_id: Optional[int] = None) -> None:
        async with aiosqlite.connect(self._path) as db:
            await db.execute(
                """
                INSERT INTO watched_targets (config_key, user_id, updated_at_iso, updated_by_user_id)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(config_key) DO UPDATE SET
                  user_id = excluded.user_id,
                  updated_at_iso = excluded.updated_at_iso,
                  updated_by_user_id = excluded.updated_by_user_id
                """,
                (slot.config_key, user_id, _now_iso(), updated_by_user_id),
            )
            await db.commit()
        self._logger.info("Saved %s=%s", slot.config_key, user_id)

    async def hydrate(
        self,
        seeds: Optional[Mapping[SlotKind, Optional[int]]] = None,
    ) -> dict[SlotKind, Optional[int]]:
        """Stored values, falling back to `seeds` for slots never saved."""
        stored = await self.load_all()
        values: dict[SlotKind, Optional[int]] = {kind: None for kind in SlotKind}
        for kind, seed in (seeds or {}).items():
            if kind not in stored and seed is not None:
                values[kind] = seed
        values.update(stored)
        return values
