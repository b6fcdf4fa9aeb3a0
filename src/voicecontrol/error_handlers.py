from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .constants import ERROR_MESSAGES
from .utils import error_embed, safe_response

log = logging.getLogger("voicecontrol.error_handlers")


class ErrorHandler(commands.Cog):
    """Centralized app command error handling."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot
        self._previous = bot.tree.on_error

    async def cog_load(self) -> None:
        self.bot.tree.on_error = self.on_app_command_error  # type: ignore[method-assign]

    async def cog_unload(self) -> None:
        self.bot.tree.on_error = self._previous  # type: ignore[method-assign]

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        if isinstance(error, app_commands.NoPrivateMessage):
            await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["guild_only"]), ephemeral=True)
            return

        # MissingPermissions is a CheckFailure too
        if isinstance(error, app_commands.CheckFailure):
            await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["missing_permissions"]), ephemeral=True)
            return

        command = interaction.command.qualified_name if interaction.command else "?"
        log.error(f"Unexpected error in app command {command}: {error}", exc_info=error)
        await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["unexpected"]), ephemeral=True)


async def setup_error_handlers(bot: commands.Bot) -> None:
    """Setup error handlers for the bot."""
    await bot.add_cog(ErrorHandler(bot))
