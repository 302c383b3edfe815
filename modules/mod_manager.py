# modules/mod_manager.py

import logging
from collections import deque
from urllib.parse import urlparse, parse_qs

import discord

from config import STEAM_CHANGELOG_URL
from modules.cache_manager import JsonCacheStore
from modules.discord_poster import build_notification_string, post_update
from modules.models import ModRecord, NotificationSubscription
from utils.http_client import fetch_html
from utils.scraper import parse_workshop_last_modified, parse_workshop_changelog
from utils.time_utils import EPOCH, is_epoch, utc_now

logger = logging.getLogger(__name__)


def changelog_url(mod_url: str) -> str:
    """Maps a workshop item URL (…/filedetails/?id=123) to its changelog page."""
    mod_ids = parse_qs(urlparse(mod_url).query).get("id")
    if not mod_ids:
        raise ValueError(f"Workshop URL '{mod_url}' has no 'id' parameter")
    return STEAM_CHANGELOG_URL.format(mod_id=mod_ids[0])


class ModManager:
    """
    Owns the mod and notification databases and runs the round-robin mod check.

    Cogs and timers talk to it only through its methods. Every mutation is
    written through to the JSON caches; a failed write is logged and the
    in-memory state is kept.
    """

    def __init__(self, mods_store: JsonCacheStore, notifications_store: JsonCacheStore):
        self.mods_store = mods_store
        self.notifications_store = notifications_store
        self.mods: dict[str, ModRecord] = {}
        self.notifications: dict[str, NotificationSubscription] = {}
        self.queue: deque[str] = deque()

    # ── queries ──────────────────────────────────────────────────────────

    def list_mods(self, guild_id: str) -> list[ModRecord]:
        return [mod for mod in self.mods.values() if guild_id in mod.guilds]

    def list_notifications(self) -> dict[str, NotificationSubscription]:
        return dict(self.notifications)

    def list_notifications_for_guild(self, guild_id: str) -> NotificationSubscription | None:
        return self.notifications.get(guild_id)

    # ── mutations ────────────────────────────────────────────────────────

    def _delete_guild(self, guild_id: str) -> None:
        """Removes a guild from every mod, deleting mods nobody monitors anymore."""
        for mod_url, mod in list(self.mods.items()):
            mod.guilds.discard(guild_id)
            if not mod.guilds:
                del self.mods[mod_url]

    def monitor_mods(self, new_mods: dict[str, dict], guild_id: str) -> None:
        """Replaces the set of mods monitored by a guild."""
        self._delete_guild(guild_id)

        for mod_url, new_mod in new_mods.items():
            existing = self.mods.get(mod_url)
            if existing is not None:
                existing.guilds.add(guild_id)
            else:
                self.mods[mod_url] = ModRecord(
                    name=new_mod.get("name", mod_url),
                    guilds={guild_id},
                    last_modified=EPOCH,
                    last_checked=EPOCH,
                )

        logger.info(f"Guild '{guild_id}' now monitors {len(new_mods)} mod(s), {len(self.mods)} tracked in total.")
        self.save_mods_to_cache()

    def set_notifications(self, guild_id: str, subscription: NotificationSubscription) -> None:
        self.notifications[guild_id] = subscription
        self.save_notifications_to_cache()

    def delete_all(self, guild_id: str) -> None:
        self.notifications.pop(guild_id, None)
        self._delete_guild(guild_id)
        self.save_mods_to_cache()
        self.save_notifications_to_cache()

    # ── cache ────────────────────────────────────────────────────────────

    def load_mods_from_cache(self, cached_mods: dict) -> None:
        logger.info("Loading mods from cache.")
        self.mods = {}
        for mod_url, data in cached_mods.items():
            mod = ModRecord.from_dict(data)
            if not mod.guilds:
                logger.warning(f"Dropping cached mod '{mod.name}' ({mod_url}), no guild monitors it.")
                continue
            self.mods[mod_url] = mod
        self.queue.clear()
        logger.info(f"{len(self.mods)} mods loaded from cache.")

    def load_notifications_from_cache(self, cached_notifications: dict) -> None:
        logger.info("Loading notifications from cache.")
        self.notifications = {
            str(guild_id): NotificationSubscription.from_dict(data)
            for guild_id, data in cached_notifications.items()
        }
        logger.info(f"{len(self.notifications)} notifications loaded from cache.")

    def save_mods_to_cache(self) -> None:
        logger.debug("Saving mods to cache.")
        try:
            self.mods_store.write({mod_url: mod.to_dict() for mod_url, mod in self.mods.items()})
        except Exception as e:
            logger.error(f"Could not save mods to cache: {e}")

    def save_notifications_to_cache(self) -> None:
        logger.info("Saving notifications to cache.")
        try:
            self.notifications_store.write(
                {guild_id: sub.to_dict() for guild_id, sub in self.notifications.items()}
            )
        except Exception as e:
            logger.error(f"Could not save notifications to cache: {e}")

    # ── polling ──────────────────────────────────────────────────────────

    async def check_mod(self, bot: discord.Client) -> None:
        """Checks the next mod in the round-robin queue for an update."""
        if not self.mods:
            logger.warning("No mods to check.")
            return

        if not self.queue:
            self.queue.extend(self.mods.keys())

        mod_url = self.queue.popleft()
        mod = self.mods.get(mod_url)
        if mod is None:
            logger.error(f"Cannot find mod {mod_url}.")
            return
        logger.info(f"Checking mod '{mod.name}' ({mod_url}).")

        try:
            html = await fetch_html(bot.http_session, mod_url)
            html_last_modified = parse_workshop_last_modified(html)
        except Exception as e:
            logger.error(f"Could not check mod '{mod.name}' ({mod_url}): {e}")
            return

        cached_last_modified = mod.last_modified
        logger.debug(
            f"Mod '{mod.name}', cached last updated: '{cached_last_modified}', html last updated: '{html_last_modified}'."
        )

        if is_epoch(cached_last_modified):
            logger.debug(f"Mod '{mod.name}', first update check, setting last updated to '{html_last_modified}'.")
            mod.last_modified = html_last_modified
        elif html_last_modified > cached_last_modified:
            mod.last_modified = html_last_modified
            logger.info(
                f"Mod '{mod.name}' was updated! Last update changed from '{cached_last_modified}' to '{html_last_modified}'."
            )
            changelog = await self.fetch_changelog(bot, mod_url)
            await self.notify_mod_updated(bot, mod_url, mod, changelog)
        else:
            logger.debug(f"Mod '{mod.name}', was not updated.")

        mod.last_checked = utc_now()
        self.save_mods_to_cache()

    async def fetch_changelog(self, bot: discord.Client, mod_url: str) -> str:
        """Downloads the newest changelog entry, or an error text to post in its place."""
        try:
            html = await fetch_html(bot.http_session, changelog_url(mod_url))
            changelog = parse_workshop_changelog(html)
        except Exception as e:
            logger.error(f"Could not load changelog for {mod_url}: {e}")
            return f"Error: Could not load changelog: {e}"

        return changelog.replace("\r\n", "\n").replace("\n", "\r\n")

    async def notify_mod_updated(self, bot: discord.Client, mod_url: str, mod: ModRecord, changelog: str) -> None:
        """Posts the update to every guild that monitors the mod and has notifications set."""
        for guild_id in sorted(mod.guilds):
            subscription = self.notifications.get(guild_id)
            if subscription is None:
                logger.warning(f"Not notifying anyone on guild ID '{guild_id}', no notifications set.")
                continue

            notifications_string = await build_notification_string(bot, guild_id, subscription)
            message = f"Mod `{mod.name}` (<{mod_url}>) was updated! {notifications_string}"
            await post_update(bot, subscription, message, changelog, "\r\n")
