import random

import pytest

from propinfo.catalog import load_cities, pick
from propinfo.errors import CatalogUnavailable


def test_load_strips_and_skips_blank_lines(tmp_path):
    path = tmp_path / "cities.txt"
    path.write_bytes(b"laveen-az\r\n\r\n  phoenix-az  \n\n\tmesa-az\n")
    assert load_cities(path) == ["laveen-az", "phoenix-az", "mesa-az"]


def test_missing_file(tmp_path):
    with pytest.raises(CatalogUnavailable, match="not found"):
        load_cities(tmp_path / "nope.txt")


def test_blank_file(tmp_path):
    path = tmp_path / "cities.txt"
    path.write_text("\n   \n\n", encoding="utf-8")
    with pytest.raises(CatalogUnavailable, match="empty"):
        load_cities(path)


def test_pick_follows_rng():
    cities = ["a", "b", "c", "d"]
    assert [pick(cities, random.Random(5)) for _ in range(3)] == [pick(cities, random.Random(5))] * 3
    assert pick(cities, random.Random(5)) in cities
