"""Single-shot page fetches over aiohttp."""

import asyncio
import logging
from typing import NamedTuple, Optional

import aiohttp

log = logging.getLogger(__name__)

UA = (
    "Mozilla/5.0 (Linux; Android 8.0.0; SM-G960F Build/R16NW) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/62.0.3202.84 Mobile Safari/537.36"
)

DEFAULT_HEADERS = {
    "User-Agent": UA,
    "Referer": "https://www.google.com/",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class FetchResult(NamedTuple):
    ok: bool
    status: int
    text: Optional[str] = None


async def fetch_text(
    session: aiohttp.ClientSession,
    url: str,
    timeout: float = 60,
) -> FetchResult:
    """GET ``url`` once. Never raises: transport errors come back as status 0.

    Redirects are not followed, so a 3xx is reported as-is with ok=False.
    """
    try:
        async with session.get(
            url,
            headers=DEFAULT_HEADERS,
            allow_redirects=False,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as resp:
            text = await resp.text(errors="replace")
            return FetchResult(200 <= resp.status < 300, resp.status, text)
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        log.debug(f"fetch failed for {url}: {e!r}")
        return FetchResult(False, 0, None)
