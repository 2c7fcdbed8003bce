"""
Attempt loop: resolve a detail URL, fetch it, parse it, skip duplicates, store.

Every step failure raises a ScrapeError that the loop logs before sleeping
and trying again. Only running out of attempts reaches the caller.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from .config import Settings, get_settings
from .errors import (
    AttemptsExhausted,
    DuplicateReference,
    ExtractionFailed,
    NoDetailReferenceFound,
    PersistenceFailure,
    ScrapeError,
    TransportFailure,
)
from .extract import parse_property_info
from .models import PropertyInfo
from .regions import US, Region
from .resolver import Fetch, get_valid_detail_url

log = logging.getLogger(__name__)


class ListingStorage(Protocol):
    def exists_by_reference(self, detail_url: str, partition: str) -> bool: ...

    def insert_listing(self, info: PropertyInfo, partition: str) -> str: ...


class PropertyScraper:
    def __init__(
        self,
        fetch: Fetch,
        store: ListingStorage,
        region: Region = US,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.fetch = fetch
        self.store = store
        self.region = region
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.sleep = sleep

    async def run(self, cities: Sequence[str]) -> PropertyInfo:
        attempts = self.settings.max_total_attempts
        for attempt in range(1, attempts + 1):
            try:
                return await self.attempt(cities)
            except ScrapeError as e:
                log.warning(f"Attempt {attempt}: {e}")
            except Exception:
                log.exception(f"Attempt {attempt} - unexpected error")

            if attempt < attempts:
                await self.sleep(self.settings.retry_delay_sec)

        raise AttemptsExhausted(attempts)

    async def attempt(self, cities: Sequence[str]) -> PropertyInfo:
        detail_url = await get_valid_detail_url(
            self.fetch,
            cities,
            self.rng,
            max_attempts=self.settings.max_index_attempts,
            max_page=self.settings.max_index_page,
        )
        if not detail_url:
            raise NoDetailReferenceFound()

        resp = await self.fetch(detail_url)
        if not resp.ok or not resp.text:
            raise TransportFailure(detail_url, resp.status)

        info = parse_property_info(resp.text, self.region)
        if info is None:
            raise ExtractionFailed(detail_url)
        info = info.model_copy(update={"detailUrl": detail_url})

        partition = self.region.partition
        try:
            exists = self.store.exists_by_reference(detail_url, partition)
        except Exception as e:
            raise PersistenceFailure(f"duplicate check failed for {detail_url}: {e}") from e
        if exists:
            raise DuplicateReference(detail_url)

        try:
            inserted_id = self.store.insert_listing(info, partition)
        except Exception as e:
            # The caller still gets the listing
            log.error(f"Failed to persist {detail_url} to {partition}: {e}")
            return info

        log.info(f"Stored {detail_url} in {partition} as {inserted_id} (${info.value:,})")
        return info.model_copy(update={"inserted_id": inserted_id})
