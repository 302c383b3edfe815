# utils/http_client.py
import asyncio
import aiohttp
import logging

from config import HTTP_TIMEOUT_SECS

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; SteamWorkshopNotifier/2.0)",
    "Accept-Language": "en-US,en;q=0.9",
}


class FetchError(RuntimeError):
    """Raised when a page cannot be downloaded."""


async def fetch_html(session: aiohttp.ClientSession, url: str) -> str:
    """
    Downloads a page and returns its body as text.
    Plain http links are upgraded to https. Raises FetchError on any
    network, timeout or non-2xx failure.
    """
    if url.startswith("http://"):
        url = "https://" + url[len("http://"):]

    logger.debug(f"🌐 HTTP Request: {url}")
    try:
        timeout = aiohttp.ClientTimeout(total=HTTP_TIMEOUT_SECS)
        async with session.get(url, headers=HEADERS, timeout=timeout) as response:
            if 200 <= response.status < 300:
                return await response.text()

            error_text = await response.text()
            raise FetchError(f"HTTP {response.status} for {url}: {error_text[:200]}")

    except aiohttp.ClientError as e:
        raise FetchError(f"Network/Client error for {url}: {e}") from e
    except asyncio.TimeoutError as e:
        raise FetchError(f"Request to {url} timed out after {HTTP_TIMEOUT_SECS}s") from e
