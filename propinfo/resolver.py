"""Find a listing detail URL from a random city's search results page."""

import logging
import random
import re
from typing import Awaitable, Callable, Optional, Sequence

from .catalog import pick
from .fetcher import FetchResult

log = logging.getLogger(__name__)

BASE_URL = "https://www.zillow.com"

# Search result pages embed their listings as JSON
DETAIL_URL_RE = re.compile(r'"detailUrl":"(https://www\.zillow\.com/homedetails/[^"]+)"')

MAX_ATTEMPTS = 8
MAX_PAGE = 5

Fetch = Callable[[str], Awaitable[FetchResult]]


def index_url(city: str, page: int = 1) -> str:
    if page <= 1:
        return f"{BASE_URL}/{city}/"
    return f"{BASE_URL}/{city}/{page}_p/"


def find_detail_urls(html: str) -> list[str]:
    return DETAIL_URL_RE.findall(html)


async def get_valid_detail_url(
    fetch: Fetch,
    cities: Sequence[str],
    rng: random.Random,
    max_attempts: int = MAX_ATTEMPTS,
    max_page: int = MAX_PAGE,
) -> Optional[str]:
    for attempt in range(1, max_attempts + 1):
        city = pick(cities, rng)
        page = rng.randint(1, max_page)
        url = index_url(city, page)

        resp = await fetch(url)
        if not resp.ok or not resp.text:
            log.debug(f"  index {attempt}/{max_attempts}: {url} -> status {resp.status}")
            continue

        matches = find_detail_urls(resp.text)
        if matches:
            return pick(matches, rng)
        log.debug(f"  index {attempt}/{max_attempts}: {url} has no detail URLs")

    return None
