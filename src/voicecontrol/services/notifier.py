from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

import discord

from ..constants import COLORS
from ..enforcement.interfaces import NotificationSink
from ..enforcement.models import Severity
from ..utils import safe_embed

log = logging.getLogger("voicecontrol.notifier")


class LogNotifier:
    def notify(self, message: str, severity: Severity) -> None:
        if severity is Severity.FAILURE:
            log.warning("[voice control] %s", message)
        else:
            log.info("[voice control] %s", message)


class ChannelNotifier:
    """Posts notifications as embeds to a mod-log text channel.

    Sending is scheduled on the running loop and never awaited by the caller.
    """

    def __init__(self, bot: discord.Client, channel_id: int, *, include_success: bool = True) -> None:
        self._bot = bot
        self._channel_id = channel_id
        self._include_success = include_success
        self._pending: set[asyncio.Task[None]] = set()

    def notify(self, message: str, severity: Severity) -> None:
        if severity is Severity.SUCCESS and not self._include_success:
            return
        channel = self._bot.get_channel(self._channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            log.debug("Notify channel %s not available", self._channel_id)
            return
        color = COLORS["success"] if severity is Severity.SUCCESS else COLORS["error"]
        embed = safe_embed("Voice control", message, color)
        task = asyncio.create_task(self._send(channel, embed), name="voicecontrol-notify")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, channel: discord.abc.Messageable, embed: discord.Embed) -> None:
        try:
            await channel.send(embed=embed)
        except discord.HTTPException:
            log.exception("Failed to send voice control notification")


class CompositeNotifier:
    def __init__(self, sinks: Sequence[NotificationSink]) -> None:
        self._sinks = list(sinks)

    def notify(self, message: str, severity: Severity) -> None:
        for sink in self._sinks:
            try:
                sink.notify(message, severity)
            except Exception:
                log.exception("Notification sink %s failed", type(sink).__name__)


def build_notifier(bot: discord.Client, channel_id: Optional[int], *, include_success: bool = True) -> CompositeNotifier:
    sinks: list[NotificationSink] = [LogNotifier()]
    if channel_id:
        sinks.append(ChannelNotifier(bot, channel_id, include_success=include_success))
    return CompositeNotifier(sinks)
