from __future__ import annotations

import asyncio
import logging
from typing import Optional

import discord
from discord.ext import commands

from .config import Settings
from .database import initialize_database
from .enforcement.dispatcher import MutationDispatcher
from .enforcement.engine import EnforcementEngine
from .enforcement.registry import TargetRegistry
from .error_handlers import setup_error_handlers
from .services.discord_adapters import ChannelDirectory, StaticCredentialProvider, VoicePermissionOracle
from .services.notifier import build_notifier
from .services.rest_transport import RestMemberTransport
from .services.stats import EnforcementStats
from .services.target_store import WatchedTargetStore

log = logging.getLogger("voicecontrol.bot")


class _CommandSyncManager:
    def __init__(self, bot: "VoiceControlBot") -> None:
        self.bot = bot
        self._lock = asyncio.Lock()

    async def sync_startup(self) -> None:
        if self.bot.settings.sync_guild_id:
            await self.sync_guild(self.bot.settings.sync_guild_id)
        else:
            await self.sync_global()

    async def sync_global(self) -> None:
        async with self._lock:
            synced = await self.bot.tree.sync()
            log.info("Commands synced globally (%d)", len(synced))

    async def sync_guild(self, guild_id: int) -> None:
        async with self._lock:
            guild = discord.Object(id=guild_id)
            self.bot.tree.copy_global_to(guild=guild)
            synced = await self.bot.tree.sync(guild=guild)
            log.info("Commands synced to guild %d (%d)", guild_id, len(synced))


class VoiceControlBot(commands.Bot):
    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        intents.members = True
        intents.voice_states = True

        log.info("INTENTS: guilds=%s members=%s voice_states=%s", intents.guilds, intents.members, intents.voice_states)

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            allowed_mentions=discord.AllowedMentions.none(),
            help_command=None,
        )

        self.settings = settings
        self.stats = EnforcementStats()
        self.registry = TargetRegistry()
        self.target_store = WatchedTargetStore(settings.sqlite_path)

        self.transport = RestMemberTransport(
            api_base=settings.api_base,
            timeout_seconds=settings.http_timeout_seconds,
            audit_log_reason=settings.audit_log_reason,
        )
        self.dispatcher = MutationDispatcher(
            credentials=StaticCredentialProvider(settings.token),
            transport=self.transport,
            notifier=build_notifier(self, settings.notify_channel_id, include_success=settings.notify_on_success),
            stats=self.stats,
        )
        self.engine = EnforcementEngine(
            registry=self.registry,
            directory=ChannelDirectory(self),
            permissions=VoicePermissionOracle(self),
            dispatcher=self.dispatcher,
            acting_identity=self._acting_identity,
            stats=self.stats,
        )
        self._sync_mgr = _CommandSyncManager(self)

    def _acting_identity(self) -> Optional[int]:
        return self.user.id if self.user else None

    async def setup_hook(self) -> None:
        await initialize_database(self.settings.sqlite_path, [self.target_store])

        self.registry.load(await self.target_store.hydrate(self.settings.seed_targets))
        log.info(
            "Watched slots: %s",
            ", ".join(f"{k.value}={v}" for k, v in self.registry.snapshot().items()),
        )

        await self.transport.start()
        await setup_error_handlers(self)

        try:
            await self.load_extension("voicecontrol.cogs.voice_control")
        except commands.ExtensionError:
            log.exception("Failed to load voice control cog")
            raise

        await self._sync_mgr.sync_startup()
        log.info("Voice control startup complete")

    async def on_ready(self) -> None:
        log.info("Logged in as %s (ID: %s) in %d guild(s)", self.user, self._acting_identity(), len(self.guilds))

    async def close(self) -> None:
        try:
            await self.engine.drain(timeout=self.settings.shutdown_drain_seconds)
            await self.transport.close()
        finally:
            await super().close()
