# cogs/mods.py
import logging
import discord
from discord.ext import commands

from config import MESSAGE_CHUNK_SIZE
from modules.discord_poster import post_new_message_to_context, resolve_channel, resolve_member, resolve_role
from modules.models import NotificationSubscription
from utils.checks import admin_only
from utils.scraper import parse_mods_html
from utils.text_utils import split_string

logger = logging.getLogger(__name__)


class Mods(commands.Cog):
    """Per-guild mod monitoring and notification settings."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @property
    def mod_manager(self):
        return self.bot.mod_manager

    @commands.command(name="info", help="Show monitored mods and who gets notified.")
    @commands.guild_only()
    @admin_only()
    async def info(self, ctx: commands.Context):
        logger.debug(f"Received 'info' command from user '{ctx.author}'.")
        guild_id = str(ctx.guild.id)
        mods = self.mod_manager.list_mods(guild_id)
        notifications = self.mod_manager.list_notifications_for_guild(guild_id)

        try:
            info_string = f"Monitoring {len(mods)} mod(s)."
            if notifications:
                info_string += (
                    f" Notifying {len(notifications.member_ids)} members and {len(notifications.role_ids)} roles"
                    f" on {len(notifications.channel_ids)} channels. \r\n"
                )
                channels = [f"> {(await resolve_channel(self.bot, cid)).mention}" for cid in notifications.channel_ids]
                members = [f"> {(await resolve_member(ctx.guild, mid)).mention}" for mid in notifications.member_ids]
                roles = [f"> {(await resolve_role(ctx.guild, rid)).mention}" for rid in notifications.role_ids]

                if channels:
                    info_string += "\r\n Channels: \r\n " + "\r\n".join(channels) + " \r\n"
                if members:
                    info_string += "\r\n Members: \r\n " + "\r\n".join(members) + " \r\n"
                if roles:
                    info_string += "\r\n Roles: \r\n " + "\r\n".join(roles)
            else:
                info_string += " Notifications disabled."

            if mods:
                info_string += "\r\n Mods: \r\n " + "".join(f"> {mod.name}\r\n" for mod in mods)
        except Exception as e:
            logger.error(f"Could not build info for guild '{guild_id}': {e}", exc_info=True)
            await post_new_message_to_context(ctx, f"Error: {e}")
            return

        for part in split_string(info_string, MESSAGE_CHUNK_SIZE):
            if part:
                await post_new_message_to_context(ctx, part)

    @commands.command(name="monitor", help="Monitor the mods listed in an attached Arma 3 launcher preset.")
    @commands.guild_only()
    @admin_only()
    async def monitor(self, ctx: commands.Context):
        logger.debug(f"Received 'monitor' command from user '{ctx.author}'.")
        attachments = ctx.message.attachments
        if not attachments:
            await post_new_message_to_context(ctx, "Error: No attachment found.")
            return

        if any("html" not in (attachment.content_type or "").lower() for attachment in attachments):
            await post_new_message_to_context(ctx, "Error: HTML attachment expected.")
            return

        logger.debug("Parsing attachments.")
        mods = {}
        for attachment in attachments:
            try:
                html = (await attachment.read()).decode("utf-8", errors="replace")
                mods.update(parse_mods_html(html))
            except Exception as e:
                logger.warning(f"Could not parse attachment '{attachment.filename}': {e}")
                await post_new_message_to_context(ctx, f"Error: {e}")
                return

        # monitor_mods replaces the guild's whole set, so all presets go in at once
        self.mod_manager.monitor_mods(mods, str(ctx.guild.id))
        await post_new_message_to_context(ctx, f"Parsed {len(mods)} mods.")

    @commands.command(name="notify", help="Set the channels, members and roles to notify (mention them).")
    @commands.guild_only()
    @admin_only()
    async def notify(self, ctx: commands.Context):
        logger.debug(f"Received 'notify' command from user '{ctx.author}'.")
        message = ctx.message
        bot_id = self.bot.user.id if self.bot.user else None

        subscription = NotificationSubscription(
            channel_ids=[str(channel.id) for channel in message.channel_mentions],
            member_ids=[str(member.id) for member in message.mentions if member.id != bot_id],
            role_ids=[str(role.id) for role in message.role_mentions],
        )
        self.mod_manager.set_notifications(str(ctx.guild.id), subscription)

        await post_new_message_to_context(
            ctx,
            f"Notifications set, {len(subscription.member_ids)} members and {len(subscription.role_ids)} roles"
            f" will be notified on {len(subscription.channel_ids)} channels.",
        )

    @commands.command(name="disable", help="Stop monitoring mods and clear notifications for this server.")
    @commands.guild_only()
    @admin_only()
    async def disable(self, ctx: commands.Context):
        logger.debug(f"Received 'disable' command from user '{ctx.author}'.")
        self.mod_manager.delete_all(str(ctx.guild.id))
        await post_new_message_to_context(ctx, "Monitoring disabled.")

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild):
        logger.info(f"Removed from guild '{guild.name}' ({guild.id}), clearing its mods and notifications.")
        self.mod_manager.delete_all(str(guild.id))


async def setup(bot: commands.Bot):
    await bot.add_cog(Mods(bot))
    logger.info("✔ cogs.mods loaded")
