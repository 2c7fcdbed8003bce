import importlib.util
import json
from pathlib import Path

import pytest

from propinfo.db import ListingStore
from propinfo.models import PropertyInfo

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "scrape_property.py"

_spec = importlib.util.spec_from_file_location("scrape_property", SCRIPT)
cli = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(cli)


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, settings):
    async def no_scrape(*args, **kwargs):
        raise AssertionError("live scrape started")

    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "scrape_once", no_scrape)


def test_zero_attempts_rejected():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--attempts", "0"])
    assert exc.value.code == 2


def test_negative_delay_rejected():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--delay", "-1"])
    assert exc.value.code == 2


def test_recent_zero_lists_without_scraping(capsys):
    assert cli.main(["--recent", "0"]) == 0
    assert json.loads(capsys.readouterr().out) == []


def test_recent_prints_stored_rows(settings, capsys):
    info = PropertyInfo(
        urls=["https://photos.zillowstatic.com/fp/a-cc_ft_960.jpg"] * 3,
        value=375000,
        beds="4",
        baths="2",
        square_footage="2,139",
        address="4933 W Melody Ln",
        city_state_zipcode="Laveen, AZ 85339",
        detailUrl="https://www.zillow.com/homedetails/x/1_zpid/",
    )
    ListingStore(settings.db_path).insert_listing(info, "listings")

    assert cli.main(["--recent", "5"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["address"] for r in rows] == ["4933 W Melody Ln"]


def test_missing_catalog_exits_2():
    assert cli.main([]) == 2
