import pytest

from conftest import FakeBot, FakeChannel, FakeGuild
from modules.discord_poster import NO_MENTIONS_TEXT, build_notification_string, post_update
from modules.models import NotificationSubscription


@pytest.mark.asyncio
async def test_long_header_is_split_between_mentions():
    channel = FakeChannel(10)
    member_ids = list(range(100000000000000000, 100000000000000000 + 150))
    bot = FakeBot(channels=[channel], guilds=[FakeGuild(1, members=member_ids)])
    subscription = NotificationSubscription(["10"], [str(m) for m in member_ids])

    mentions = await build_notification_string(bot, "1", subscription)
    header = f"Mod `CBA_A3` (<https://example.invalid/?id=1>) was updated! {mentions}"
    assert len(header) > 2000

    delivered = await post_update(bot, subscription, header, "Fixed bug")

    *header_parts, body = channel.sent
    assert len(header_parts) > 1
    assert all(len(part) <= 1900 for part in header_parts)
    assert " ".join(header_parts) == header
    assert body == "```Fixed bug```"
    assert delivered == len(channel.sent)


@pytest.mark.asyncio
async def test_short_header_is_one_message():
    channel = FakeChannel(10)
    bot = FakeBot(channels=[channel], guilds=[FakeGuild(1)])
    subscription = NotificationSubscription(["10"])

    await post_update(bot, subscription, "Arma was updated!", "a\nb", "\n")

    assert channel.sent == ["Arma was updated!", "```a\nb```"]


@pytest.mark.asyncio
async def test_no_mentions_without_members_or_roles():
    bot = FakeBot(guilds=[FakeGuild(1)])
    assert await build_notification_string(bot, "1", NotificationSubscription(["10"])) == NO_MENTIONS_TEXT
    assert await build_notification_string(bot, "1", None) == NO_MENTIONS_TEXT


@pytest.mark.asyncio
async def test_unknown_guild_means_no_mentions():
    bot = FakeBot()
    subscription = NotificationSubscription(["10"], ["20"])
    assert await build_notification_string(bot, "1", subscription) == NO_MENTIONS_TEXT
