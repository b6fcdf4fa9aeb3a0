from __future__ import annotations

import logging
from typing import Any

import discord

from .constants import COLORS, MAX_EMBED_DESCRIPTION, MAX_EMBED_TITLE

log = logging.getLogger("voicecontrol.utils")


def safe_embed(title: str, description: str, color: int = COLORS["default"]) -> discord.Embed:
    """Create an embed with safe length limits."""
    if len(title) > MAX_EMBED_TITLE:
        title = title[:MAX_EMBED_TITLE - 3] + "…"
    if len(description) > MAX_EMBED_DESCRIPTION:
        description = description[:MAX_EMBED_DESCRIPTION - 3] + "…"

    return discord.Embed(title=title, description=description, color=color)


async def safe_response(
    interaction: discord.Interaction,
    content: str | None = None,
    embed: discord.Embed | None = None,
    ephemeral: bool = False,
    **kwargs: Any,
) -> bool:
    """Respond to an interaction, falling back to a followup if already answered."""
    try:
        if interaction.response.is_done():
            await interaction.followup.send(content=content, embed=embed, ephemeral=ephemeral, **kwargs)
        else:
            await interaction.response.send_message(content=content, embed=embed, ephemeral=ephemeral, **kwargs)
        return True
    except discord.HTTPException as e:
        log.error(f"Failed to send response: {e}")
        return False


def error_embed(message: str) -> discord.Embed:
    """Create a standardized error embed."""
    return safe_embed("Error", message, COLORS["error"])


def info_embed(message: str) -> discord.Embed:
    """Create a standardized info embed."""
    return safe_embed("Information", message, COLORS["info"])


def format_user(user_id: int | None) -> str:
    return f"<@{user_id}>" if user_id else "(none)"
