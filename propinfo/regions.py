"""The two supported markets.

Each region picks its own city catalog, its own storage partition and the
currency / postal code shapes the extractor accepts.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Region:
    key: str
    cities_file: str
    partition: str
    currency_re: str
    postal_re: str


US = Region(
    key="us",
    cities_file="cities.txt",
    partition="listings",
    currency_re=r"\$",
    postal_re=r"\d{5}",
)

# C$649,900 / CAD 649,900 / $649,900 ; M4C 1B5
CA = Region(
    key="ca",
    cities_file="cities_ca.txt",
    partition="listings_ca",
    currency_re=r"(?:C\$|CAD\s?\$?|\$)\s?",
    postal_re=r"[A-Z]\d[A-Z]\s\d[A-Z]\d",
)

REGIONS = {r.key: r for r in (US, CA)}
PARTITIONS = frozenset(r.partition for r in REGIONS.values())


def region_for(canada: bool) -> Region:
    return CA if canada else US
