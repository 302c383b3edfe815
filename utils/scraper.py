# utils/scraper.py
"""
HTML extraction for Arma 3 launcher presets, Steam Workshop pages and the
Arma 3 SpotRep blog.

Every parser takes raw HTML and returns plain Python values. Missing or
reshaped markup raises ParseError so callers can treat it like a failed fetch.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from bs4 import BeautifulSoup, Tag

from utils.time_utils import parse_workshop_date, parse_spotrep_date

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when a page does not have the expected structure."""


@dataclass(frozen=True)
class SpotRepPost:
    time: datetime
    info: str
    link: str


def html_to_text(tag: Tag) -> str:
    """Renders a tag as plain text, one line per block, without word wrapping."""
    for br in tag.find_all("br"):
        br.replace_with("\n")
    for block in tag.find_all(["p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6", "tr"]):
        block.insert_before("\n")
        block.insert_after("\n")

    lines = [line.strip() for line in tag.get_text().splitlines()]
    text_lines: list[str] = []
    for line in lines:
        # collapse runs of blank lines
        if not line and (not text_lines or not text_lines[-1]):
            continue
        text_lines.append(line)
    return "\n".join(text_lines).strip()


def parse_mods_html(html: str) -> dict[str, dict[str, str]]:
    """Extracts {workshop url: {"name": display name}} from a launcher preset export."""
    soup = BeautifulSoup(html, "html.parser")
    mods = {}
    for row in soup.select('tr[data-type="ModContainer"]'):
        link = row.select_one('[data-type="Link"]')
        name = row.select_one('[data-type="DisplayName"]')
        if link is None or name is None:
            raise ParseError("Mod row without a link or display name")
        mods[link.get_text(strip=True)] = {"name": name.get_text(strip=True)}

    if not mods:
        raise ParseError("No mods found in the preset")
    return mods


def parse_workshop_last_modified(html: str, now: datetime | None = None) -> datetime:
    """Returns the last 'Updated' (or 'Posted') timestamp shown on a workshop item page."""
    soup = BeautifulSoup(html, "html.parser")
    container = soup.select_one(".detailsStatsContainerRight")
    stats = container.select(".detailsStatRight") if container else []
    if not stats:
        logger.error("Last modified date not found, mod set to private?")
        raise ParseError("Last modified date not found, mod set to private?")

    raw = stats[-1].get_text(strip=True)
    try:
        return parse_workshop_date(raw, now)
    except ValueError as e:
        raise ParseError(str(e)) from e


def parse_workshop_changelog(html: str) -> str:
    """Returns the newest changelog entry of a workshop item without its headline."""
    soup = BeautifulSoup(html, "html.parser")
    announcement = soup.select_one(".workshopAnnouncement")
    if announcement is None:
        raise ParseError("No changelog entry found")

    for unwanted in announcement.select(".headline, .commentsLink"):
        unwanted.decompose()
    return html_to_text(announcement)


def parse_spotrep_html(html: str) -> SpotRepPost:
    """Returns the newest post on the SpotRep listing page."""
    soup = BeautifulSoup(html, "html.parser")
    article = soup.find("article")
    if article is None:
        raise ParseError("No SpotRep article found")

    excerpt = article.select_one("div.dev-post-excerpt, .dev-post-excerpt")
    time_tag = article.find("time")
    header = article.find("header")
    link_tag = header.find("a", href=True) if header else None
    if excerpt is None or time_tag is None or link_tag is None:
        raise ParseError("SpotRep article is missing its excerpt, time or link")

    try:
        time = parse_spotrep_date(time_tag.get_text(strip=True))
    except ValueError as e:
        raise ParseError(str(e)) from e

    info = " ".join(html_to_text(excerpt).split())
    return SpotRepPost(time=time, info=info, link=link_tag["href"])


def parse_spotrep_post_html(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    content = soup.select_one("div.post-content, .post-content")
    if content is None:
        raise ParseError("SpotRep post has no content")
    return html_to_text(content)
