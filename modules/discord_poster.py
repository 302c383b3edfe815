# modules/discord_poster.py
# Handles all Discord message posting and mention rendering.

import logging
import discord
from discord.ext import commands

from config import MESSAGE_CHUNK_SIZE
from modules.models import NotificationSubscription
from utils.text_utils import split_string

logger = logging.getLogger(__name__)

NO_MENTIONS_TEXT = "No members or roles to notify."


async def resolve_channel(bot: discord.Client, channel_id: str):
    channel = bot.get_channel(int(channel_id))
    if channel is None:
        channel = await bot.fetch_channel(int(channel_id))
    return channel


async def resolve_guild(bot: discord.Client, guild_id: str):
    guild = bot.get_guild(int(guild_id))
    if guild is None:
        guild = await bot.fetch_guild(int(guild_id))
    return guild


async def resolve_member(guild, member_id: str):
    member = guild.get_member(int(member_id))
    if member is None:
        member = await guild.fetch_member(int(member_id))
    return member


async def resolve_role(guild, role_id: str):
    role = guild.get_role(int(role_id))
    if role is None:
        roles = await guild.fetch_roles()
        role = discord.utils.get(roles, id=int(role_id))
        if role is None:
            raise LookupError(f"Role {role_id} not found in guild {guild.id}")
    return role


async def build_notification_string(
    bot: discord.Client,
    guild_id: str,
    subscription: NotificationSubscription | None,
) -> str:
    """
    Renders the 'Notifying @member @role' suffix for a guild.
    Members or roles that cannot be resolved are logged and left out.
    """
    if subscription is None:
        return NO_MENTIONS_TEXT
    if not subscription.member_ids and not subscription.role_ids:
        return NO_MENTIONS_TEXT

    try:
        guild = await resolve_guild(bot, guild_id)
    except Exception as e:
        logger.error(f"DiscordPoster: Could not fetch guild ID '{guild_id}': {e}")
        return NO_MENTIONS_TEXT

    mentions = []
    for member_id in subscription.member_ids:
        try:
            mentions.append((await resolve_member(guild, member_id)).mention)
        except Exception as e:
            logger.warning(f"DiscordPoster: Could not resolve member '{member_id}' in guild '{guild_id}': {e}")
    for role_id in subscription.role_ids:
        try:
            mentions.append((await resolve_role(guild, role_id)).mention)
        except Exception as e:
            logger.warning(f"DiscordPoster: Could not resolve role '{role_id}' in guild '{guild_id}': {e}")

    if not mentions:
        return NO_MENTIONS_TEXT
    return f"Notifying {' '.join(mentions)}"


async def post_new_general_message(bot: discord.Client, channel_id: str, content: str) -> discord.Message | None:
    """
    Sends a new message to the specified channel.

    Returns:
        The discord.Message object that was sent, or None if an error occurred.
    """
    if not content:
        logger.warning("DiscordPoster: post_new_general_message called with no content.")
        return None

    try:
        channel = await resolve_channel(bot, channel_id)
    except Exception as e:
        logger.error(f"DiscordPoster: Channel ID {channel_id} could not be resolved: {e}")
        return None

    try:
        return await channel.send(content)
    except discord.Forbidden:
        logger.error(f"DiscordPoster: Missing permissions to send message in channel {channel_id}.", exc_info=True)
    except Exception as e:
        logger.error(f"DiscordPoster: Failed to send message in channel {channel_id}: {e}", exc_info=True)

    return None


async def post_update(
    bot: discord.Client,
    subscription: NotificationSubscription,
    header: str,
    body: str,
    separator: str = "\r\n",
) -> int:
    """
    Posts the header followed by the body, split into code blocks, to every
    channel of a subscription. A failing channel does not stop the others.

    Returns:
        The number of messages that were delivered.
    """
    # long mention lists are split between mentions
    header_chunks = [chunk for chunk in split_string(header, MESSAGE_CHUNK_SIZE, " ") if chunk]
    chunks = [chunk for chunk in split_string(body, MESSAGE_CHUNK_SIZE, separator) if chunk]

    delivered = 0
    for channel_id in subscription.channel_ids:
        for header_chunk in header_chunks:
            if await post_new_general_message(bot, channel_id, header_chunk):
                delivered += 1
        for chunk in chunks:
            if await post_new_general_message(bot, channel_id, f"```{chunk}```"):
                delivered += 1
    return delivered


async def post_new_message_to_context(ctx: commands.Context, content: str) -> discord.Message | None:
    """
    Replies to the message that invoked a command.
    Used by cogs.
    """
    if not content:
        logger.warning("DiscordPoster: post_new_message_to_context called with no content.")
        return None

    command_name = ctx.command.name if ctx.command else "unknown command"
    try:
        return await ctx.reply(content, mention_author=False)
    except discord.Forbidden:
        logger.error(f"DiscordPoster: Missing permissions to reply for command '{command_name}'.", exc_info=True)
    except Exception as e:
        logger.error(f"DiscordPoster: Failed to reply for command '{command_name}': {e}", exc_info=True)

    return None
