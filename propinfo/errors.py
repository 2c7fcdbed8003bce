"""Exceptions raised along the scrape pipeline.

Everything below ``AttemptsExhausted`` is recovered inside the attempt loop;
only exhaustion reaches the caller. ``CatalogUnavailable`` is raised before
the loop starts.
"""


class ScrapeError(Exception):
    """Base class for pipeline failures."""


class CatalogUnavailable(ScrapeError):
    pass


class TransportFailure(ScrapeError):
    def __init__(self, url: str, status: int = 0):
        super().__init__(f"failed to fetch {url} (status {status})")
        self.url = url
        self.status = status


class NoDetailReferenceFound(ScrapeError):
    def __init__(self):
        super().__init__("no detail URL found on any index page")


class ExtractionFailed(ScrapeError):
    def __init__(self, url: str):
        super().__init__(f"parse failed or value > $20M for {url}")
        self.url = url


class DuplicateReference(ScrapeError):
    def __init__(self, url: str):
        super().__init__(f"already stored: {url}")
        self.url = url


class PersistenceFailure(ScrapeError):
    pass


class AttemptsExhausted(ScrapeError):
    def __init__(self, attempts: int):
        super().__init__(f"Failed to find a valid property after {attempts} attempts.")
        self.attempts = attempts
