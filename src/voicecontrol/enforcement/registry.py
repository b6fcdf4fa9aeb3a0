from __future__ import annotations

import logging
from typing import Mapping, Optional

from .models import SlotKind

log = logging.getLogger("voicecontrol.registry")


class TargetRegistry:
    """The three watched slots.

    Written by the operator UI, read by the enforcement engine. Both run on
    the bot's event loop, so no locking is needed.
    """

    def __init__(self, initial: Optional[Mapping[SlotKind, Optional[int]]] = None) -> None:
        self._slots: dict[SlotKind, Optional[int]] = {kind: None for kind in SlotKind}
        if initial:
            self.load(initial)

    def bind(self, slot: SlotKind, identity: int) -> Optional[int]:
        """Bind `identity` to `slot`, or clear the slot if it already holds it.

        Returns the slot's new value.
        """
        current = self._slots[slot]
        new_value = None if current == identity else identity
        self._slots[slot] = new_value
        log.info("Slot %s: %s -> %s", slot.value, current, new_value)
        return new_value

    def get(self, slot: SlotKind) -> Optional[int]:
        return self._slots[slot]

    def clear(self, slot: SlotKind) -> None:
        if self._slots[slot] is not None:
            log.info("Slot %s cleared (was %s)", slot.value, self._slots[slot])
        self._slots[slot] = None

    def load(self, values: Mapping[SlotKind, Optional[int]]) -> None:
        for kind, identity in values.items():
            self._slots[SlotKind(kind)] = identity

    def snapshot(self) -> dict[SlotKind, Optional[int]]:
        return dict(self._slots)

    def is_empty(self) -> bool:
        return all(v is None for v in self._slots.values())
