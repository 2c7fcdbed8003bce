"""City catalog: one city slug per line (e.g. ``laveen-az``)."""

import logging
import random
from pathlib import Path
from typing import Sequence, TypeVar

from .errors import CatalogUnavailable

log = logging.getLogger(__name__)

T = TypeVar("T")


def load_cities(path: Path) -> list[str]:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogUnavailable(f"cities list not found at {path}") from e

    cities = [line.strip() for line in raw.splitlines() if line.strip()]
    if not cities:
        raise CatalogUnavailable(f"cities list is empty: {path}")
    log.debug(f"Loaded {len(cities)} cities from {path}")
    return cities


def pick(items: Sequence[T], rng: random.Random) -> T:
    return rng.choice(items)
