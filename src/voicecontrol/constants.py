from __future__ import annotations

from typing import Final

# Discord limits
MAX_EMBED_DESCRIPTION: Final[int] = 4096
MAX_EMBED_TITLE: Final[int] = 256

DEFAULT_API_BASE: Final[str] = "https://discord.com/api/v10"
DEFAULT_AUDIT_LOG_REASON: Final[str] = "Voice control enforcement"

# Colors (hex values)
COLORS = {
    "default": 0x5865F2,
    "success": 0x57F287,
    "error": 0xED4245,
    "info": 0x3498DB,
}

# Error messages
ERROR_MESSAGES = {
    "missing_permissions": "You don't have permission to use this command.",
    "guild_only": "This command can only be used in a server.",
    "self_target": "You can't put yourself or the bot under voice control.",
    "unexpected": "Something went wrong running that command.",
}
