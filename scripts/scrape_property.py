#!/usr/bin/env python3
"""
One-shot listing scrape without the API server (for cron boxes that can't
reach the HTTP endpoint).

Usage:
    python3 scripts/scrape_property.py                  # US listing
    python3 scripts/scrape_property.py --canada         # CA listing
    python3 scripts/scrape_property.py --attempts 2 --delay 3
    python3 scripts/scrape_property.py --recent 10      # show stored listings
"""

import argparse
import asyncio
import functools
import json
import logging
import sys

import aiohttp
from pydantic import ValidationError

from propinfo.catalog import load_cities
from propinfo.config import get_settings, with_overrides
from propinfo.db import ListingStore
from propinfo.errors import AttemptsExhausted, CatalogUnavailable
from propinfo.fetcher import fetch_text
from propinfo.regions import region_for
from propinfo.scraper import PropertyScraper

log = logging.getLogger(__name__)


async def scrape_once(settings, region, cities):
    store = ListingStore(settings.db_path)
    async with aiohttp.ClientSession() as session:
        fetch = functools.partial(fetch_text, session, timeout=settings.fetch_timeout_sec)
        return await PropertyScraper(fetch, store, region, settings).run(cities)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Scrape one random listing")
    parser.add_argument("--canada", action="store_true", help="Use the CA cities and partition")
    parser.add_argument("--attempts", type=int, help="Override MAX_TOTAL_ATTEMPTS")
    parser.add_argument("--delay", type=float, help="Override RETRY_DELAY_SEC")
    parser.add_argument("--recent", type=int, metavar="N", help="Print the N newest stored listings and exit")
    args = parser.parse_args(argv)

    settings = get_settings()
    overrides = {}
    if args.attempts is not None:
        overrides["max_total_attempts"] = args.attempts
    if args.delay is not None:
        overrides["retry_delay_sec"] = args.delay
    if overrides:
        try:
            settings = with_overrides(settings, **overrides)
        except ValidationError as e:
            parser.error(str(e))
    if args.recent is not None and args.recent < 0:
        parser.error("--recent must be >= 0")

    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")
    region = region_for(args.canada)

    if args.recent is not None:
        rows = ListingStore(settings.db_path).find_recent(region.partition, args.recent)
        print(json.dumps(rows, indent=2))
        return 0

    try:
        cities = load_cities(settings.public_dir / region.cities_file)
    except CatalogUnavailable as e:
        log.error(str(e))
        return 2

    try:
        info = asyncio.run(scrape_once(settings, region, cities))
    except AttemptsExhausted as e:
        print(json.dumps({"error": str(e)}))
        return 1

    print(json.dumps(info.to_response(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
