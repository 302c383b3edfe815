import pytest

from modules.cache_manager import JsonCacheStore
from modules.mod_manager import ModManager


class FakeChannel:
    def __init__(self, channel_id, fail=False):
        self.id = channel_id
        self.fail = fail
        self.sent = []

    @property
    def mention(self):
        return f"<#{self.id}>"

    async def send(self, content):
        if self.fail:
            raise RuntimeError("Missing Access")
        self.sent.append(content)
        return content


class FakeMember:
    def __init__(self, member_id):
        self.id = member_id

    @property
    def mention(self):
        return f"<@{self.id}>"


class FakeRole:
    def __init__(self, role_id):
        self.id = role_id

    @property
    def mention(self):
        return f"<@&{self.id}>"


class FakeGuild:
    def __init__(self, guild_id, members=(), roles=()):
        self.id = guild_id
        self.members = {m: FakeMember(m) for m in members}
        self.roles = {r: FakeRole(r) for r in roles}

    def get_member(self, member_id):
        return self.members.get(member_id)

    async def fetch_member(self, member_id):
        raise LookupError(f"Unknown Member {member_id}")

    def get_role(self, role_id):
        return self.roles.get(role_id)

    async def fetch_roles(self):
        return list(self.roles.values())


class FakeBot:
    def __init__(self, channels=(), guilds=()):
        self.channels = {c.id: c for c in channels}
        self.guilds = {g.id: g for g in guilds}
        self.http_session = None

    def get_channel(self, channel_id):
        return self.channels.get(channel_id)

    async def fetch_channel(self, channel_id):
        raise LookupError(f"Unknown Channel {channel_id}")

    def get_guild(self, guild_id):
        return self.guilds.get(guild_id)

    async def fetch_guild(self, guild_id):
        raise LookupError(f"Unknown Guild {guild_id}")


def workshop_page(*stats):
    cells = "".join(f'<div class="detailsStatRight">{s}</div>' for s in stats)
    return f'<html><body><div class="detailsStatsContainerRight">{cells}</div></body></html>'


def changelog_page(*paragraphs):
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return (
        '<div class="workshopAnnouncement">'
        '<div class="headline">Update: 12 Mar @ 4:05pm</div>'
        f"{body}"
        '<a class="commentsLink">0 comments</a>'
        "</div>"
    )


@pytest.fixture
def stores(tmp_path):
    return (
        JsonCacheStore(tmp_path / "mods_cache.json"),
        JsonCacheStore(tmp_path / "notifications_cache.json"),
        JsonCacheStore(tmp_path / "spotrep_cache.json"),
    )


@pytest.fixture
def manager(stores):
    mods_store, notifications_store, _ = stores
    return ModManager(mods_store, notifications_store)


@pytest.fixture
def fake_fetch(monkeypatch):
    """Replaces network access with a url -> html (or exception) mapping and records requested urls."""
    pages = {}
    requested = []

    async def fetch_html(session, url):
        requested.append(url)
        page = pages.get(url)
        if page is None:
            from utils.http_client import FetchError
            raise FetchError(f"HTTP 404 for {url}")
        if isinstance(page, Exception):
            raise page
        return page

    monkeypatch.setattr("modules.mod_manager.fetch_html", fetch_html)
    monkeypatch.setattr("modules.spotrep_manager.fetch_html", fetch_html)
    return pages, requested
