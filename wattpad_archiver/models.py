"""
Job and Document structures passed between intake, orchestrator and store.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from wattpad_archiver.exceptions import InvalidJobError
from wattpad_archiver.schemas.job_schema import JOB_SCHEMA
from wattpad_archiver.schemas.story_schema import STORY_SCHEMA
from wattpad_archiver.utils.url_utils import is_http_url
from wattpad_archiver.utils.validation import check_required_fields, validate_against_schema


def now_ms() -> int:
    """Epoch milliseconds, the timestamp unit used in every stored record."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Job:
    """One request to scrape a story end to end."""

    job_id: str
    url: str

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "Job":
        """
        Build a Job from the intake body {url, storyId}.

        Raises:
            InvalidJobError: missing/blank fields, non-string values or a
                url that is not absolute http(s)
        """
        if not isinstance(payload, dict):
            raise InvalidJobError("Payload must be a JSON object")

        is_valid, missing = check_required_fields(payload, list(JOB_SCHEMA.keys()))
        if not is_valid:
            raise InvalidJobError(f"Missing required fields: {missing}")

        data = validate_against_schema(payload, JOB_SCHEMA, strict=True)
        if not isinstance(data["url"], str) or not isinstance(data["storyId"], str):
            raise InvalidJobError("Fields url and storyId must be strings")
        if not is_http_url(data["url"]):
            raise InvalidJobError(f"Not an http(s) URL: {data['url']}")

        return cls(job_id=data["storyId"].strip(), url=data["url"].strip())


@dataclass
class Document:
    """The assembled story. Persisted once, on full success."""

    title: str
    author: str
    pages: List[List[str]] = field(default_factory=list)
    summary: Optional[str] = None
    url: Optional[str] = None
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "author": self.author,
            "pages": [list(page) for page in self.pages],
            "summary": self.summary,
            "url": self.url,
            "timestamp": self.timestamp,
        }
        return validate_against_schema(data, STORY_SCHEMA, strict=True)
