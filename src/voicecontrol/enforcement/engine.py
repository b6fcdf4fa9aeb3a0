from __future__ import annotations

import asyncio
import logging
from typing import Callable, Mapping, Optional, Sequence

from ..services.stats import EnforcementStats
from .dispatcher import MutationDispatcher
from .interfaces import Directory, PermissionOracle
from .models import ActionRequest, GroupContext, PresenceEvent, SlotKind
from .registry import TargetRegistry

log = logging.getLogger("voicecontrol.engine")


def match_triggers(
    event: PresenceEvent,
    group_id: int,
    slots: Mapping[SlotKind, Optional[int]],
) -> list[ActionRequest]:
    """Evaluate the three slot triggers for one event.

    Each trigger is independent, so an event yields zero to three requests.
    """
    subject = event.subject_id
    fired: list[SlotKind] = []

    if slots.get(SlotKind.DISCONNECT) == subject and event.channel_id is not None:
        fired.append(SlotKind.DISCONNECT)
    # Only an explicit False counts; None means the field was not reported.
    if slots.get(SlotKind.MUTE) == subject and event.is_muted is False:
        fired.append(SlotKind.MUTE)
    if slots.get(SlotKind.DEAFEN) == subject and event.is_deafened is False:
        fired.append(SlotKind.DEAFEN)

    return [ActionRequest(group_id=group_id, subject_id=subject, mutation=kind.mutation) for kind in fired]


class EnforcementEngine:
    """Turns presence events for watched identities into moderation requests.

    Requests are dispatched as independent tasks and never awaited while
    events are being processed. Repeated triggers are not deduplicated.
    """

    def __init__(
        self,
        *,
        registry: TargetRegistry,
        directory: Directory,
        permissions: PermissionOracle,
        dispatcher: MutationDispatcher,
        acting_identity: Callable[[], Optional[int]],
        stats: Optional[EnforcementStats] = None,
    ) -> None:
        self.registry = registry
        self.directory = directory
        self.permissions = permissions
        self.dispatcher = dispatcher
        self.acting_identity = acting_identity
        self.stats = stats or dispatcher.stats
        self._inflight: set[asyncio.Task[object]] = set()

    def resolve_group(self, event: PresenceEvent) -> GroupContext:
        if event.channel_id is None:
            return GroupContext(None)
        return GroupContext(self.directory.resolve_group(event.channel_id))

    def on_presence_batch(self, events: Sequence[PresenceEvent]) -> None:
        slots = self.registry.snapshot()
        empty = self.registry.is_empty()
        for event in events:
            self.stats.events_seen += 1
            if empty:
                continue

            ctx = self.resolve_group(event)
            if not ctx.resolved:
                self.stats.skipped_unresolved += 1
                continue

            if not self.permissions.can_manage_voice(self.acting_identity(), event.channel_id):
                self.stats.skipped_denied += 1
                log.debug("No voice permission in channel %s; skipping user %s", event.channel_id, event.subject_id)
                continue

            for request in match_triggers(event, ctx.group_id, slots):
                self._spawn(request)

    def _spawn(self, request: ActionRequest) -> None:
        self.stats.requests_dispatched += 1
        log.info(
            "Enforcing %s on user %s in guild %s",
            request.mutation.value,
            request.subject_id,
            request.group_id,
        )
        task = asyncio.create_task(
            self.dispatcher.dispatch(request),
            name=f"voicecontrol-{request.mutation.value}-{request.subject_id}",
        )
        self._inflight.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[object]) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Dispatch task %s crashed", task.get_name(), exc_info=exc)

    def inflight(self) -> int:
        return len(self._inflight)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight requests; used on shutdown."""
        if not self._inflight:
            return
        pending = list(self._inflight)
        done, still_pending = await asyncio.wait(pending, timeout=timeout)
        if still_pending:
            log.warning("Cancelling %d unfinished voice control requests", len(still_pending))
            for task in still_pending:
                task.cancel()
            await asyncio.gather(*still_pending, return_exceptions=True)
