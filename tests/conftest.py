import pytest

from propinfo.config import Settings
from propinfo.fetcher import FetchResult

PHOTOS = [
    "https://photos.zillowstatic.com/fp/1f2e3d4c-cc_ft_960.jpg",
    "https://photos.zillowstatic.com/fp/9e8d7c6f-cc_ft_960.jpg",
    "https://photos.zillowstatic.com/fp/4c3e2f1d-cc_ft_960.jpg",
    "https://photos.zillowstatic.com/fp/7d6e5f4c-cc_ft_960.jpg",
]

TITLE = "4933 W Melody Ln, Laveen, AZ 85339 | MLS #6512345 | Zillow"
SUMMARY = "$375,000 4 bd 2 ba 2,139 sqft ... 4933 W Melody Ln, Laveen, AZ 85339"


def listing_page(summary=SUMMARY, title=TITLE, photos=PHOTOS):
    head = f"<title>{title}</title>" if title else ""
    imgs = "\n".join(f'<img src="{u}">' for u in photos)
    return (
        f"<html><head>{head}</head>\n"
        f'<body>\n<div class="summary">{summary}</div>\n'
        f"{imgs}\n</body></html>"
    )


def index_page(*detail_urls):
    items = ",".join(f'{{"zpid":"1","detailUrl":"{u}"}}' for u in detail_urls)
    return f'<script id="__NEXT_DATA__">{{"listResults":[{items}]}}</script>'


class FakeStore:
    def __init__(self, existing=(), fail_exists=False, fail_insert=False):
        self.existing = set(existing)
        self.fail_exists = fail_exists
        self.fail_insert = fail_insert
        self.checked = []
        self.inserted = []

    def exists_by_reference(self, detail_url, partition):
        self.checked.append((detail_url, partition))
        if self.fail_exists:
            raise RuntimeError("db down")
        return detail_url in self.existing

    def insert_listing(self, info, partition):
        if self.fail_insert:
            raise RuntimeError("write failed")
        self.inserted.append((info, partition))
        return str(len(self.inserted))


class FakeFetch:
    """Serves index pages and detail pages from dicts; records every URL."""

    def __init__(self, index_html=None, details=None, fail=False):
        self.index_html = index_html
        self.details = details or {}
        self.fail = fail
        self.urls = []

    async def __call__(self, url):
        self.urls.append(url)
        if self.fail:
            return FetchResult(False, 0, None)
        if "/homedetails/" in url:
            html = self.details.get(url)
            return FetchResult(html is not None, 200 if html else 404, html)
        html = self.index_html(len(self.urls)) if callable(self.index_html) else self.index_html
        return FetchResult(html is not None, 200 if html else 403, html)


class SleepRecorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_dir=tmp_path,
        public_dir=tmp_path,
        max_total_attempts=5,
        retry_delay_sec=10,
        max_index_attempts=8,
        max_index_page=5,
    )


@pytest.fixture
def sleeper():
    return SleepRecorder()
