# cogs/logs.py
import logging
import pathlib
from discord.ext import commands

from config import COMBINED_LOG_FILE, ERROR_LOG_FILE, MESSAGE_CHUNK_SIZE
from modules.discord_poster import post_new_message_to_context
from utils.checks import admin_only

logger = logging.getLogger(__name__)


def read_log_tail(path: str | pathlib.Path, size: int = MESSAGE_CHUNK_SIZE) -> str:
    """Returns the last `size` characters of a log file."""
    return pathlib.Path(path).read_text(encoding="utf-8", errors="replace")[-size:]


class Logs(commands.Cog):
    """Post the tail of the bot's log files."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.command(name="logs", help="Show the end of combined.log and error.log.")
    @admin_only()
    async def logs(self, ctx: commands.Context):
        logger.debug(f"Received 'logs' command from user '{ctx.author}'.")
        for log_file in (COMBINED_LOG_FILE, ERROR_LOG_FILE):
            name = pathlib.Path(log_file).name
            try:
                tail = read_log_tail(log_file)
            except OSError as e:
                logger.warning(f"Could not read {log_file}: {e}")
                await post_new_message_to_context(ctx, f"Error: Could not read `{name}`: {e}")
                continue
            await post_new_message_to_context(ctx, f"`{name}`\r\n```{tail or ' '}```")


async def setup(bot: commands.Bot):
    await bot.add_cog(Logs(bot))
    logger.info("✔ cogs.logs loaded")
