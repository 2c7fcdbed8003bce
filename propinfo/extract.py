"""
Listing detail page -> PropertyInfo.

The page text is matched by a chain of strategies, strongest first:

  1. CombinedPatternStrategy  one tolerant pass over
                              "$375,000 4 bd 2 ba 2,139 sqft ... 4933 W Melody Ln, Laveen, AZ 85339"
  2. FieldByFieldStrategy     each field on its own, street address from <title>
  3. TitleBackfillStrategy    "address, city, ST zip" split straight from <title>

A later strategy only fills fields that are still missing, and the chain stops
as soon as every field is present. Nothing here keeps state between calls.
"""

import logging
import math
import re
from functools import lru_cache
from typing import Optional, Protocol

from .models import PropertyInfo
from .regions import US, Region

log = logging.getLogger(__name__)

Fields = dict[str, str]

REQUIRED = ("value", "beds", "baths", "sqft", "address", "city", "state", "zipcode")
MAX_VALUE = 20_000_000
MIN_IMAGES = 3

IMG_RE = re.compile(r"(https?://[^,\s]+_960\.jpg)")
TITLE_RE = re.compile(r"<title>([^<]+)</title>", re.I)
BEDS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:bd|beds?)", re.I)
BATHS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:ba|baths?)", re.I)
SQFT_RE = re.compile(r"([\d,]+)\s*(?:sqft|Square\s*Feet)", re.I)
VALUE_STRIP_RE = re.compile(r"C\$|CAD|\$|,|\s", re.I)

CITY = r"[A-Za-z\.\-'\s]"
# Bounded so scans stay linear on long comma-free text
CITY_RUN = CITY + r"{1,60}"
STATE = r"[A-Z]{2}"


class RegionPatterns:
    """Compiled patterns for one region's currency marker and postal code."""

    def __init__(self, region: Region):
        cur = region.currency_re
        postal = region.postal_re

        self.combined = re.compile(
            r"(?P<value>" + cur + r"\d{1,3}(?:,\d{3})*)"
            r"(?:[^$]{0,120}?)"
            r"(?P<beds>\d+(?:\.\d+)?)\s*(?:bd|beds?)"
            r"(?:[^$]{0,120}?)"
            r"(?P<baths>\d+(?:\.\d+)?)\s*(?:ba|baths?)"
            r"(?:[^$]{0,160}?)"
            r"(?P<sqft>[\d,]+)\s*(?:sqft|Square\s*Feet)"
            r"(?:[^$]{0,200}?)"
            r"(?P<address>\d{1,6}[\w\s\.\-#']{1,80}?),\s*"
            r"(?P<city>" + CITY + r"{1,60}?),\s*"
            r"(?P<state>" + STATE + r")\s+"
            r"(?P<zipcode>" + postal + r")",
            re.I | re.S,
        )
        self.price = re.compile(cur + r"(\d{1,3}(?:,\d{3})*)", re.I)
        self.locality = re.compile(r"(" + CITY_RUN + r"),\s*(" + STATE + r")\s+(" + postal + r")", re.I)
        self.title_address = re.compile(r"^(.+?),\s*" + CITY_RUN + r",\s*" + STATE + r"\s+" + postal)
        self.street = re.compile(
            r"(\d{1,6}\s+[A-Za-z0-9\.\-#'\s]{1,80})(?=,\s*" + CITY_RUN + r",\s*" + STATE + r"\s+" + postal + r")"
        )
        self.title_split = re.compile(r"(.+?),\s*(" + CITY_RUN + r"),\s*(" + STATE + r")\s+(" + postal + r")")


def _first(pattern: re.Pattern, text: str, group: int = 1) -> Optional[str]:
    m = pattern.search(text)
    return m.group(group) if m else None


def _title(html: str) -> Optional[str]:
    return _first(TITLE_RE, html)


# ── Strategies ───────────────────────────────────────────────────────────

class Strategy(Protocol):
    name: str

    def attempt(self, html: str) -> Optional[Fields]: ...


class CombinedPatternStrategy:
    name = "combined"

    def __init__(self, patterns: RegionPatterns):
        self.patterns = patterns

    def attempt(self, html: str) -> Optional[Fields]:
        m = self.patterns.combined.search(html)
        if not m:
            return None
        return {k: m.group(k) for k in REQUIRED}


class FieldByFieldStrategy:
    name = "field_by_field"

    def __init__(self, patterns: RegionPatterns):
        self.patterns = patterns

    def attempt(self, html: str) -> Optional[Fields]:
        p = self.patterns
        fields = {
            "value": _first(p.price, html),
            "beds": _first(BEDS_RE, html),
            "baths": _first(BATHS_RE, html),
            "sqft": _first(SQFT_RE, html),
        }

        # Zillow titles usually read "4933 W Melody Ln, Laveen, AZ 85339 | MLS #..."
        m = p.locality.search(html)
        if m:
            fields["city"], fields["state"], fields["zipcode"] = (g.strip() for g in m.groups())
            title = _title(html)
            title_address = _first(p.title_address, title) if title else None
            fields["address"] = title_address or _first(p.street, html)

        found = {k: v for k, v in fields.items() if v}
        return found or None


class TitleBackfillStrategy:
    name = "title_backfill"

    def __init__(self, patterns: RegionPatterns):
        self.patterns = patterns

    def attempt(self, html: str) -> Optional[Fields]:
        title = _title(html)
        if not title:
            return None
        m = self.patterns.title_split.search(title)
        if not m:
            return None
        return dict(zip(("address", "city", "state", "zipcode"), (g.strip() for g in m.groups())))


@lru_cache(maxsize=None)
def strategies_for(region: Region) -> tuple[Strategy, ...]:
    patterns = RegionPatterns(region)
    return (
        CombinedPatternStrategy(patterns),
        FieldByFieldStrategy(patterns),
        TitleBackfillStrategy(patterns),
    )


def run_strategies(html: str, strategies: tuple[Strategy, ...]) -> Fields:
    fields: Fields = {}
    for strategy in strategies:
        found = strategy.attempt(html)
        if not found:
            continue
        for key, val in found.items():
            fields.setdefault(key, val)
        if all(fields.get(k) for k in REQUIRED):
            log.debug(f"fields complete after {strategy.name}")
            break
    return fields


# ── Assembly ─────────────────────────────────────────────────────────────

def extract_image_urls(html: str) -> list[str]:
    return list(dict.fromkeys(IMG_RE.findall(html)))


def parse_value(raw: str) -> Optional[int | float]:
    """'$375,000' -> 375000. None if unparseable or above MAX_VALUE."""
    cleaned = VALUE_STRIP_RE.sub("", raw)
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value) or value > MAX_VALUE:
        return None
    return int(value) if value.is_integer() else value


def parse_property_info(
    html: str,
    region: Region = US,
    strategies: Optional[tuple[Strategy, ...]] = None,
) -> Optional[PropertyInfo]:
    urls = extract_image_urls(html)
    # Fewer than 3 photos: not a real listing page (or a blocked/stub one)
    if len(urls) < MIN_IMAGES:
        return None

    fields = run_strategies(html, strategies or strategies_for(region))
    f = {k: v.strip() for k, v in fields.items()}
    if not all(f.get(k) for k in REQUIRED):
        return None

    value = parse_value(f["value"])
    if value is None:
        return None

    return PropertyInfo(
        urls=urls,
        value=value,
        beds=f["beds"],
        baths=f["baths"],
        square_footage=f["sqft"],
        address=f["address"],
        city_state_zipcode=f"{f['city']}, {f['state']} {f['zipcode']}",
    )
