"""
Listing storage. One sqlite table per region partition ("listings",
"listings_ca"); each row holds the full listing document as JSON plus the
columns it is looked up by.
"""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from .models import RECORD_VERSION, PropertyInfo, StoredListing
from .regions import PARTITIONS


def _check_partition(partition: str) -> str:
    if partition not in PARTITIONS:
        raise ValueError(f"unknown partition: {partition}")
    return partition


def _split_locality(city_state_zipcode: str) -> tuple[str | None, str | None]:
    """'Laveen, AZ 85339' -> ('Laveen', 'AZ')"""
    city, _, rest = city_state_zipcode.rpartition(",")
    state = rest.strip().split(" ", 1)[0] if rest.strip() else None
    return (city.strip() or None), state


def _ensure_partition(conn: sqlite3.Connection, partition: str):
    p = _check_partition(partition)
    # detail_url may be NULL for older rows; sqlite lets NULLs repeat under UNIQUE
    conn.executescript(f"""
        CREATE TABLE IF NOT EXISTS {p} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            detail_url TEXT,
            url TEXT,
            city TEXT,
            state TEXT,
            scraped_at TEXT NOT NULL,
            version TEXT,
            doc TEXT NOT NULL
        );
        CREATE UNIQUE INDEX IF NOT EXISTS idx_{p}_detail_url ON {p}(detail_url);
        CREATE INDEX IF NOT EXISTS idx_{p}_url ON {p}(url);
        CREATE INDEX IF NOT EXISTS idx_{p}_scraped_at ON {p}(scraped_at DESC);
        CREATE INDEX IF NOT EXISTS idx_{p}_city_state ON {p}(city, state);
    """)
    conn.commit()


class ListingStore:
    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._ready: set[str] = set()

    def connect(self, partition: str) -> sqlite3.Connection:
        _check_partition(partition)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        if partition not in self._ready:
            _ensure_partition(conn, partition)
            self._ready.add(partition)
        return conn

    def exists_by_reference(self, detail_url: str, partition: str) -> bool:
        conn = self.connect(partition)
        try:
            row = conn.execute(
                f"SELECT 1 FROM {partition} WHERE detail_url = ? LIMIT 1", [detail_url]
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def insert_listing(self, info: PropertyInfo, partition: str,
                       scraped_at: datetime | None = None) -> str:
        """Store one listing. Raises sqlite3.IntegrityError on a repeated detailUrl."""
        doc = StoredListing(
            **info.model_dump(exclude={"inserted_id"}),
            scraped_at=scraped_at or datetime.now(timezone.utc),
            version=RECORD_VERSION,
        )
        city, state = _split_locality(doc.city_state_zipcode)
        conn = self.connect(partition)
        try:
            cur = conn.execute(
                f"""INSERT INTO {partition}
                    (detail_url, url, city, state, scraped_at, version, doc)
                    VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [doc.detailUrl, doc.urls[0] if doc.urls else None, city, state,
                 doc.scraped_at.isoformat(), doc.version,
                 doc.model_dump_json(by_alias=True, exclude_none=True)],
            )
            conn.commit()
            return str(cur.lastrowid)
        finally:
            conn.close()

    def find_recent(self, partition: str, limit: int = 20) -> list[dict]:
        conn = self.connect(partition)
        try:
            rows = conn.execute(
                f"SELECT id, doc FROM {partition} ORDER BY scraped_at DESC LIMIT ?", [limit]
            ).fetchall()
        finally:
            conn.close()
        return [{**json.loads(r["doc"]), "_insertedId": str(r["id"])} for r in rows]
