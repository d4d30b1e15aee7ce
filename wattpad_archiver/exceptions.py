"""
Exception types raised while scraping, storing and rendering stories.

Every ScrapeError raised during a job is caught by the orchestrator and turned
into the failed disposition (error flag + deletion marker + cleared progress).
"""


class ScrapeError(Exception):
    """Base exception for a scrape job."""
    pass


class NavigationError(ScrapeError):
    """Raised when a page cannot be reached (network, DNS, bad response)."""
    pass


class ScrapeTimeoutError(NavigationError, TimeoutError):
    """Raised when navigation or auto scroll exceeds its time limit."""
    pass


class ExtractionError(ScrapeError):
    """Raised when an expected element is missing from the loaded page."""
    pass


class PageCrashError(ScrapeError):
    """Raised when the browser tab crashes underneath a running job."""
    pass


class PersistenceError(ScrapeError):
    """Raised when a write to the store fails."""
    pass


class BrowserSessionError(ScrapeError):
    """Raised when the shared browser cannot launch or hand out a tab."""
    pass


class InvalidJobError(ValueError):
    """Raised when an intake payload is missing fields or malformed."""
    pass


class EpubGenerationError(Exception):
    """Raised when the EPUB file cannot be built."""
    pass


class JobAbortedError(ScrapeError):
    """Raised inside a job that was force-failed from outside (shutdown sweep)."""
    pass
