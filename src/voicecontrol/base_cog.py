from __future__ import annotations

import logging

from discord.ext import commands


class BaseCog(commands.Cog):
    """Base class for all cogs with common functionality."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot
        self.log = logging.getLogger(f"voicecontrol.cog.{self.__class__.__name__.lower()}")

    async def cog_load(self) -> None:
        self.log.info(f"Loaded {self.__class__.__name__}")

    async def cog_unload(self) -> None:
        self.log.info(f"Unloaded {self.__class__.__name__}")
