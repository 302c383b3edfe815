# cogs/identity.py
import logging
from discord.ext import commands

from modules.discord_poster import post_new_message_to_context

logger = logging.getLogger(__name__)


class Identity(commands.Cog):
    """Lets anyone look up their Discord user ID, e.g. to be added to ADMIN_IDS."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.command(name="id", help="Reply with your Discord user ID.")
    async def id_cmd(self, ctx: commands.Context):
        logger.debug(f"Received 'id' command from user '{ctx.author}'.")
        await post_new_message_to_context(ctx, str(ctx.author.id))


async def setup(bot: commands.Bot):
    await bot.add_cog(Identity(bot))
    logger.info("✔ cogs.identity loaded")
