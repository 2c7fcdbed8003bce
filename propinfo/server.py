"""
propinfo API — FastAPI server that scrapes one random Zillow listing per call.

Routes:
  /api/property_info               Random US listing (public/cities.txt -> listings)
  /api/property_info?canada=true   Random CA listing (public/cities_ca.txt -> listings_ca)

Meant to be hit by an external cron; calls closer than RATE_LIMIT_WINDOW_SEC
apart get a 429 and do no work.

Start: uvicorn propinfo.server:app --port 8000
"""

import functools
import logging

import aiohttp
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .catalog import load_cities
from .config import get_settings
from .db import ListingStore
from .errors import AttemptsExhausted, CatalogUnavailable
from .fetcher import fetch_text
from .models import ErrorResponse, placeholder
from .ratelimit import RequestRateLimiter
from .regions import region_for
from .scraper import PropertyScraper

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")
log = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store"}

app = FastAPI(title="propinfo API", version="1.0")
app.state.settings = settings
app.state.limiter = RequestRateLimiter(settings.rate_limit_window_sec)
app.state.store = ListingStore(settings.db_path)


# ── Property info ────────────────────────────────────────────────────────

@app.get("/api/property_info")
async def property_info(request: Request, canada: bool = False):
    state = request.app.state
    if not state.limiter.admit():
        log.warning(
            f"Rate-limited call to /api/property_info "
            f"(only one allowed per {state.limiter.window_sec}s)"
        )
        return JSONResponse(ErrorResponse(error="Rate limited. Try again later.").model_dump(),
                            status_code=429, headers=NO_STORE)

    cfg = state.settings
    region = region_for(canada)

    try:
        cities = load_cities(cfg.public_dir / region.cities_file)
    except CatalogUnavailable as e:
        # Misconfiguration shows up in the logs, not to the caller
        log.error(f"Failed reading {region.cities_file}: {e}")
        return JSONResponse(placeholder().to_response(), headers=NO_STORE)

    log.info(f"Scraping a {region.key} listing from {len(cities)} cities")
    async with aiohttp.ClientSession() as session:
        fetch = functools.partial(fetch_text, session, timeout=cfg.fetch_timeout_sec)
        scraper = PropertyScraper(fetch, state.store, region, cfg)
        try:
            info = await scraper.run(cities)
        except AttemptsExhausted as e:
            log.error(str(e))
            return JSONResponse(ErrorResponse(error=str(e)).model_dump(), status_code=502, headers=NO_STORE)

    return JSONResponse(info.to_response(), headers=NO_STORE)
