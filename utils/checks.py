# utils/checks.py
import logging
from discord.ext import commands

from config import ADMIN_IDS

logger = logging.getLogger(__name__)


class NotAdmin(commands.CheckFailure):
    """Raised when a command is used by someone outside ADMIN_IDS."""


def is_admin(user_id) -> bool:
    return str(user_id) in ADMIN_IDS


def admin_only():
    """Command check that only lets configured admins through."""
    async def predicate(ctx: commands.Context) -> bool:
        if not is_admin(ctx.author.id):
            logger.warning(f"User '{ctx.author}' does not have admin permissions.")
            raise NotAdmin("No admin permissions.")
        return True
    return commands.check(predicate)
