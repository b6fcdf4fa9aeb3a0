from __future__ import annotations

from typing import Awaitable, Callable, Optional, Union

import discord
from discord import app_commands
from discord.ext import commands

from ..base_cog import BaseCog
from ..constants import COLORS, ERROR_MESSAGES
from ..enforcement.engine import EnforcementEngine
from ..enforcement.models import PresenceEvent, SlotKind
from ..enforcement.registry import TargetRegistry
from ..services.stats import EnforcementStats
from ..services.target_store import WatchedTargetStore
from ..utils import error_embed, format_user, info_embed, safe_embed, safe_response

MemberOrUser = Union[discord.Member, discord.User]

SLOT_CHOICES = [app_commands.Choice(name=kind.label, value=kind.value) for kind in SlotKind]


def presence_event_from_voice_state(
    member: discord.Member,
    before: discord.VoiceState,
    after: discord.VoiceState,
) -> PresenceEvent:
    """Normalize a discord.py voice state update.

    `mute`/`deaf` are the server-side flags, the ones the bot can set.
    """
    return PresenceEvent(
        subject_id=member.id,
        channel_id=after.channel.id if after.channel is not None else None,
        previous_channel_id=before.channel.id if before.channel is not None else None,
        is_muted=after.mute,
        is_deafened=after.deaf,
    )


class VoiceControlCog(BaseCog):
    """Operator controls for the watched slots plus the voice state listener."""

    voicecontrol = app_commands.Group(
        name="voicecontrol",
        description="Automatic disconnect / mute / deafen for watched members",
        guild_only=True,
        default_permissions=discord.Permissions(move_members=True),
    )

    def __init__(self, bot: commands.Bot) -> None:
        super().__init__(bot)
        self._menus = [
            app_commands.ContextMenu(name=kind.label, callback=self._menu_callback(kind))
            for kind in SlotKind
        ]

    async def cog_load(self) -> None:
        # Services are attached on the bot instance in bot.py
        self.registry: TargetRegistry = getattr(self.bot, "registry")
        self.store: WatchedTargetStore = getattr(self.bot, "target_store")
        self.engine: EnforcementEngine = getattr(self.bot, "engine")
        self.stats: EnforcementStats = getattr(self.bot, "stats")
        for menu in self._menus:
            self.bot.tree.add_command(menu)
        await super().cog_load()

    async def cog_unload(self) -> None:
        for menu in self._menus:
            self.bot.tree.remove_command(menu.name, type=menu.type)
        await super().cog_unload()

    def _menu_callback(self, slot: SlotKind) -> Callable[[discord.Interaction, discord.Member], Awaitable[None]]:
        @app_commands.guild_only()
        @app_commands.default_permissions(move_members=True)
        async def callback(interaction: discord.Interaction, user: discord.Member) -> None:
            await self.toggle_slot(interaction, slot, user)

        return callback

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        self.engine.on_presence_batch([presence_event_from_voice_state(member, before, after)])

    async def toggle_slot(self, interaction: discord.Interaction, slot: SlotKind, user: MemberOrUser) -> None:
        if interaction.guild is None:
            await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["guild_only"]), ephemeral=True)
            return

        bot_id = self.bot.user.id if self.bot.user else None
        if user.id in (interaction.user.id, bot_id):
            await safe_response(interaction, embed=error_embed(ERROR_MESSAGES["self_target"]), ephemeral=True)
            return

        previous = self.registry.get(slot)
        new_value = self.registry.bind(slot, user.id)
        await self._persist(slot, new_value, previous, updated_by_user_id=interaction.user.id)

        state = "(active)" if new_value == user.id else "(inactive)"
        self.log.info("%s set %s %s for %s", interaction.user.id, slot.value, state, user.id)
        await safe_response(interaction, embed=info_embed(f"{slot.label} {state} for {user.mention}"), ephemeral=True)

    async def _persist(
        self,
        slot: SlotKind,
        value: Optional[int],
        previous: Optional[int],
        *,
        updated_by_user_id: int,
    ) -> None:
        """Save a slot change; the in-memory slot is restored if the save fails."""
        try:
            await self.store.save(slot, value, updated_by_user_id=updated_by_user_id)
        except Exception:
            self.registry.load({slot: previous})
            self.log.error("Failed to save %s; slot restored to %s", slot.config_key, previous)
            raise

    @voicecontrol.command(name="status", description="Show watched members and enforcement counters")
    async def status(self, interaction: discord.Interaction) -> None:
        embed = safe_embed("Voice control", "Watched members per action.", COLORS["info"])
        for kind in SlotKind:
            embed.add_field(name=kind.label, value=format_user(self.registry.get(kind)), inline=True)
        s = self.stats
        embed.add_field(
            name="Counters",
            value=(
                f"events: {s.events_seen}\n"
                f"dispatched: {s.requests_dispatched} (in flight: {self.engine.inflight()})\n"
                f"ok: {s.succeeded} rejected: {s.rejected} "
                f"no auth: {s.auth_unavailable} network: {s.network_failures}"
            ),
            inline=False,
        )
        await safe_response(interaction, embed=embed, ephemeral=True)

    @voicecontrol.command(name="set", description="Toggle an automatic action for a member")
    @app_commands.describe(slot="Which action", user="Member to watch (run again to stop)")
    @app_commands.choices(slot=SLOT_CHOICES)
    async def set_slot(self, interaction: discord.Interaction, slot: app_commands.Choice[str], user: discord.Member) -> None:
        await self.toggle_slot(interaction, SlotKind(slot.value), user)

    @voicecontrol.command(name="clear", description="Stop an automatic action")
    @app_commands.describe(slot="Which action")
    @app_commands.choices(slot=SLOT_CHOICES)
    async def clear_slot(self, interaction: discord.Interaction, slot: app_commands.Choice[str]) -> None:
        kind = SlotKind(slot.value)
        previous = self.registry.get(kind)
        self.registry.clear(kind)
        await self._persist(kind, None, previous, updated_by_user_id=interaction.user.id)
        await safe_response(
            interaction,
            embed=info_embed(f"{kind.label} cleared (was {format_user(previous)})"),
            ephemeral=True,
        )


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(VoiceControlCog(bot))
