from __future__ import annotations

import logging
from typing import Optional

import discord

log = logging.getLogger("voicecontrol.discord_adapters")


class ChannelDirectory:
    """Resolves channels from the client cache; no API calls."""

    def __init__(self, bot: discord.Client) -> None:
        self.bot = bot

    def resolve_group(self, channel_id: int) -> Optional[int]:
        channel = self.bot.get_channel(channel_id)
        guild = getattr(channel, "guild", None)
        if guild is None:
            return None
        return guild.id


class VoicePermissionOracle:
    """Checks Move Members for the acting member in the event's channel."""

    def __init__(self, bot: discord.Client) -> None:
        self.bot = bot

    def can_manage_voice(self, acting_identity: Optional[int], channel_id: int) -> bool:
        if acting_identity is None:
            return False
        channel = self.bot.get_channel(channel_id)
        guild = getattr(channel, "guild", None)
        if channel is None or guild is None:
            return False
        member = guild.get_member(acting_identity)
        if member is None:
            return False
        return bool(channel.permissions_for(member).move_members)


class StaticCredentialProvider:
    """Hands out the bot token as an Authorization header value."""

    def __init__(self, token: str, scheme: str = "Bot") -> None:
        self._token = (token or "").strip()
        self._scheme = scheme

    def current_token(self) -> Optional[str]:
        if not self._token:
            return None
        if not self._scheme:
            return self._token
        return f"{self._scheme} {self._token}"
