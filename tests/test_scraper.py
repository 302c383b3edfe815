from datetime import datetime

import pytest
import pytz

from conftest import changelog_page, workshop_page
from utils.scraper import (
    ParseError,
    parse_mods_html,
    parse_spotrep_html,
    parse_spotrep_post_html,
    parse_workshop_changelog,
    parse_workshop_last_modified,
)

PRESET = """
<html><body><div class="mod-list"><table>
  <tr data-type="ModContainer">
    <td data-type="DisplayName">CBA_A3</td>
    <td><span class="from-steam">Steam</span></td>
    <td><a href="http://steamcommunity.com/sharedfiles/filedetails/?id=450814997" data-type="Link">http://steamcommunity.com/sharedfiles/filedetails/?id=450814997</a></td>
  </tr>
  <tr data-type="ModContainer">
    <td data-type="DisplayName">ace</td>
    <td><span class="from-steam">Steam</span></td>
    <td><a href="http://steamcommunity.com/sharedfiles/filedetails/?id=463939057" data-type="Link">http://steamcommunity.com/sharedfiles/filedetails/?id=463939057</a></td>
  </tr>
</table></div></body></html>
"""


def test_parse_mods_html():
    assert parse_mods_html(PRESET) == {
        "http://steamcommunity.com/sharedfiles/filedetails/?id=450814997": {"name": "CBA_A3"},
        "http://steamcommunity.com/sharedfiles/filedetails/?id=463939057": {"name": "ace"},
    }


def test_parse_mods_html_without_mods():
    with pytest.raises(ParseError):
        parse_mods_html("<html><body><p>not a preset</p></body></html>")


def test_last_modified_uses_last_stat():
    html = workshop_page("1.2 MB", "1 Jan, 2023 @ 1:00pm", "12 Mar, 2023 @ 4:05pm")
    assert parse_workshop_last_modified(html) == datetime(2023, 3, 12, 16, 5, tzinfo=pytz.utc)


def test_last_modified_of_never_updated_item_is_posted_date():
    html = workshop_page("1.2 MB", "1 Jan, 2023 @ 1:00pm")
    assert parse_workshop_last_modified(html) == datetime(2023, 1, 1, 13, 0, tzinfo=pytz.utc)


def test_last_modified_missing():
    with pytest.raises(ParseError):
        parse_workshop_last_modified("<html><body>private</body></html>")


def test_last_modified_garbage_date():
    with pytest.raises(ParseError):
        parse_workshop_last_modified(workshop_page("1.2 MB", "yesterday"))


def test_changelog_drops_headline_and_comments():
    text = parse_workshop_changelog(changelog_page("Fixed bug", "Added thing"))
    assert text == "Fixed bug\n\nAdded thing"


def test_changelog_keeps_line_breaks():
    html = '<div class="workshopAnnouncement"><div class="headline">h</div>- one<br>- two<br/>- three</div>'
    assert parse_workshop_changelog(html) == "- one\n- two\n- three"


def test_changelog_missing():
    with pytest.raises(ParseError):
        parse_workshop_changelog("<html></html>")


def test_spotrep_listing():
    html = (
        '<article><header><a href="https://dev.arma3.com/post/spotrep-00115">SPOTREP</a></header>'
        "<time>March 5, 2024</time><div class=\"dev-post-excerpt\">Hotfix\nfor 2.16</div></article>"
    )
    post = parse_spotrep_html(html)
    assert post.time == datetime(2024, 3, 5, tzinfo=pytz.utc)
    assert post.info == "Hotfix for 2.16"
    assert post.link == "https://dev.arma3.com/post/spotrep-00115"


def test_spotrep_listing_without_article():
    with pytest.raises(ParseError):
        parse_spotrep_html("<html></html>")


def test_spotrep_listing_with_bad_date():
    html = (
        '<article><header><a href="/x">x</a></header>'
        '<time>soon</time><div class="dev-post-excerpt">x</div></article>'
    )
    with pytest.raises(ParseError):
        parse_spotrep_html(html)


def test_spotrep_post():
    html = '<div class="post-content"><h2>CHANGELOG</h2><ul><li>Fixed A</li><li>Fixed B</li></ul></div>'
    assert parse_spotrep_post_html(html) == "CHANGELOG\n\nFixed A\n\nFixed B"


def test_spotrep_post_missing():
    with pytest.raises(ParseError):
        parse_spotrep_post_html("<html></html>")
