# workshop_notifier_bot.py

import logging
import os
import sys # For directing to stdout

from config import (
    BOT_TOKEN,
    COMBINED_LOG_FILE,
    ERROR_LOG_FILE,
    LOG_DIR,
    LOG_LEVEL,
    MOD_CHECK_INTERVAL_SECS,
    SPOTREP_CHECK_INTERVAL_SECS,
)

# Standard logging setup: stdout + combined.log + error.log
os.makedirs(LOG_DIR, exist_ok=True)
_error_handler = logging.FileHandler(ERROR_LOG_FILE, encoding="utf-8")
_error_handler.setLevel(logging.ERROR)
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="[%(asctime)s] [%(levelname)-8s] [%(name)-20s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(COMBINED_LOG_FILE, encoding="utf-8"),
        _error_handler,
    ],
)
logging.getLogger("discord").setLevel(logging.WARNING)
logging.getLogger("discord.http").setLevel(logging.WARNING)

import discord
from discord.ext import commands, tasks
import aiohttp

from modules.cache_manager import create_caches, mods_cache, notifications_cache, spotrep_cache
from modules.discord_poster import post_new_message_to_context
from modules.mod_manager import ModManager
from modules.spotrep_manager import SpotRepManager
from utils.checks import NotAdmin

logger = logging.getLogger(__name__)

VALID_COMMANDS = "Valid commands: id (DM allowed), info, logs (DM allowed), monitor, notify, disable, version (DM allowed)."

# --- Intents & bot setup ---
intents = discord.Intents.default()
intents.message_content = True
bot = commands.Bot(command_prefix=commands.when_mentioned, intents=intents)
bot.http_session = None

# --- HTTP Session Management ---
async def ensure_http_session(bot_instance: commands.Bot):
    """
    Ensures that an active aiohttp.ClientSession is available on the bot instance.
    Creates a new session if one doesn't exist or if the existing one is closed.
    """
    if getattr(bot_instance, 'http_session', None) is None or bot_instance.http_session.closed:
        bot_instance.http_session = aiohttp.ClientSession()
        logger.info("🚀 Global aiohttp.ClientSession (re)created.")
    return bot_instance.http_session

async def cleanup_sessions():
    """Closes the global aiohttp.ClientSession if it exists and is open."""
    if getattr(bot, 'http_session', None) is not None and not bot.http_session.closed:
        await bot.http_session.close()
        logger.info("💨 Global aiohttp.ClientSession closed.")

# --- Startup ---
def load_state(bot_instance: commands.Bot):
    """Creates missing cache files and builds the managers from them. Raises on failure."""
    mods_store, notifications_store, spotrep_store = mods_cache(), notifications_cache(), spotrep_cache()
    create_caches(mods_store, notifications_store, spotrep_store)

    mod_manager = ModManager(mods_store, notifications_store)
    mod_manager.load_notifications_from_cache(notifications_store.read())
    mod_manager.load_mods_from_cache(mods_store.read())

    spotrep_manager = SpotRepManager(spotrep_store, mod_manager)
    spotrep_manager.load_spotrep_from_cache(spotrep_store.read())

    bot_instance.mod_manager = mod_manager
    bot_instance.spotrep_manager = spotrep_manager

# --- Periodic checks ---
@tasks.loop(seconds=MOD_CHECK_INTERVAL_SECS)
async def mod_check_loop():
    try:
        await bot.mod_manager.check_mod(bot)
    except Exception as e:
        logger.error(f"💥 Mod check tick failed: {e}", exc_info=True)

@tasks.loop(seconds=SPOTREP_CHECK_INTERVAL_SECS)
async def spotrep_check_loop():
    try:
        await bot.spotrep_manager.check_spotrep(bot)
    except Exception as e:
        logger.error(f"💥 SpotRep check tick failed: {e}", exc_info=True)

# --- Bot Events ---
@bot.event
async def on_ready():
    logger.info(f"✅ Logged in as {bot.user} (ID: {bot.user.id})")
    logger.info("Steam Workshop Notifications Discord Bot Online! Active on:")
    for guild in bot.guilds:
        logger.info(f"* {guild.name} - {guild.id}")
    await ensure_http_session(bot)

    # Load cogs
    cogs_path = "cogs"
    if os.path.isdir(cogs_path):
        for fname in sorted(os.listdir(cogs_path)):
            extension = f"{cogs_path}.{fname[:-3]}"
            if not fname.endswith(".py") or fname == "__init__.py" or extension in bot.extensions:
                continue
            try:
                await bot.load_extension(extension)
            except commands.ExtensionError as e:
                logger.error(f"❌ Failed to load cog {extension}: {e}", exc_info=True)
    else:
        logger.warning(f"ℹ️ Cogs directory '{cogs_path}' not found. No cogs loaded.")

    for loop in (mod_check_loop, spotrep_check_loop):
        if not loop.is_running():
            loop.start()
            logger.info(f"Task loop '{loop.coro.__name__}' has been started.")

@bot.event
async def on_resumed():
    """Called when the bot successfully resumes a session after a disconnection."""
    logger.info("🔄 Discord session RESUMED. Ensuring HTTP session is active.")
    await ensure_http_session(bot)

@bot.event
async def on_message(message: discord.Message):
    if message.author.bot:
        return

    prefixes = await bot.get_prefix(message)
    prefix = next((p for p in prefixes if message.content.startswith(p)), None)
    if prefix is None and message.content.strip() in (p.strip() for p in prefixes):
        logger.warning(f"No command found in message: '{message.content}' from user '{message.author}'")
        await message.reply(f"Error: No command found. {VALID_COMMANDS}", mention_author=False)
        return

    await bot.process_commands(message)

@bot.event
async def on_command_error(ctx: commands.Context, error: commands.CommandError):
    if isinstance(error, commands.CommandNotFound):
        logger.warning(f"Unknown command '{ctx.invoked_with}' from user '{ctx.author}'")
        await post_new_message_to_context(ctx, f"Error: Unknown command: `{ctx.invoked_with}`. {VALID_COMMANDS}")
    elif isinstance(error, NotAdmin):
        await post_new_message_to_context(ctx, "Error: No admin permissions.")
    elif isinstance(error, commands.NoPrivateMessage):
        logger.warning(f"Command '{ctx.invoked_with}' used in DM by user '{ctx.author}'")
        await post_new_message_to_context(ctx, f"Error: `{ctx.invoked_with}` is not available in DMs. {VALID_COMMANDS}")
    else:
        original = getattr(error, "original", error)
        logger.error(f"Command '{ctx.invoked_with}' failed: {original}", exc_info=original)
        await post_new_message_to_context(ctx, f"Error: {original}")

original_bot_close = bot.close
async def new_bot_close():
    logger.info("🛑 Bot close initiated. Cleaning up tasks and sessions...")
    for loop in (mod_check_loop, spotrep_check_loop):
        if loop.is_running():
            loop.cancel()

    if hasattr(bot, "mod_manager"):
        bot.mod_manager.save_mods_to_cache()
        bot.mod_manager.save_notifications_to_cache()
    if hasattr(bot, "spotrep_manager"):
        bot.spotrep_manager.save_spotrep_to_cache()

    await cleanup_sessions()
    await original_bot_close()
    logger.info("👋 Bot has been shut down gracefully.")

bot.close = new_bot_close


def main():
    if not BOT_TOKEN:
        logger.critical("💥 BOT_TOKEN is not set. The bot cannot start.")
        sys.exit(1)

    try:
        load_state(bot)
    except Exception as e:
        logger.critical(f"💥 Could not create or read the cache files: {e}", exc_info=True)
        sys.exit(1)

    try:
        bot.run(BOT_TOKEN, log_handler=None)
    except discord.LoginFailure as e:
        logger.critical(f"💥 Could not log in to Discord: {e}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"💥 Unhandled exception at bot.run() level: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
