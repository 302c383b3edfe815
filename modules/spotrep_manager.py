# modules/spotrep_manager.py

import logging

import discord

from config import SPOTREP_URL
from modules.cache_manager import JsonCacheStore
from modules.discord_poster import build_notification_string, post_update
from modules.mod_manager import ModManager
from utils.http_client import fetch_html
from utils.scraper import parse_spotrep_html, parse_spotrep_post_html
from utils.time_utils import parse_iso, to_iso, utc_now

logger = logging.getLogger(__name__)


class SpotRepManager:
    """Watches the Arma 3 SpotRep blog and broadcasts new posts to every subscribed guild."""

    def __init__(self, store: JsonCacheStore, mod_manager: ModManager):
        self.store = store
        self.mod_manager = mod_manager
        self.last_update = utc_now()

    def load_spotrep_from_cache(self, cached_spotrep: dict) -> None:
        logger.info("Loading SpotRep from cache.")
        if cached_spotrep.get("lastUpdate"):
            self.last_update = parse_iso(cached_spotrep["lastUpdate"])
        logger.info(f"SpotRep loaded from cache, last update: {to_iso(self.last_update)}.")

    def save_spotrep_to_cache(self) -> None:
        logger.info("Saving SpotRep to cache.")
        try:
            self.store.write({"lastUpdate": to_iso(self.last_update)})
        except Exception as e:
            logger.error(f"Could not save SpotRep to cache: {e}")

    async def check_spotrep(self, bot: discord.Client) -> None:
        """
        Posts the newest SpotRep to every guild with notifications set, unlike mod
        updates which only reach guilds monitoring that mod.
        """
        try:
            html = await fetch_html(bot.http_session, SPOTREP_URL)
            spotrep = parse_spotrep_html(html)
        except Exception as e:
            logger.error(f"Could not parse ArmA SpotRep: {e}")
            return

        if not spotrep.time > self.last_update:
            logger.debug("SpotRep not updated")
            return

        logger.info(f"SpotRep updated: {spotrep.link}")
        try:
            post_html = await fetch_html(bot.http_session, spotrep.link)
            changelog = parse_spotrep_post_html(post_html)
        except Exception as e:
            logger.error(f"Could not parse ArmA SpotRep changelog: {e}")
            return

        # Stamped with the time of the check, not the post's own date
        self.last_update = utc_now()

        for guild_id, subscription in self.mod_manager.list_notifications().items():
            notifications_string = await build_notification_string(bot, guild_id, subscription)
            message = f"Arma was updated `{spotrep.info}` (<{spotrep.link}>)! {notifications_string}"
            await post_update(bot, subscription, message, changelog, "\n")

        self.save_spotrep_to_cache()
