"""
Core data models for the resource framework.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


def _header_lookup(headers: Optional[Dict[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


@dataclass
class Request:
    """Represents an HTTP request addressed to a resource."""

    method: HTTPMethod
    path: str
    headers: Dict[str, str]
    body: Optional[str] = None
    query_params: Optional[Dict[str, str]] = None
    path_params: Optional[Dict[str, str]] = None

    def get_header(self, name: str) -> Optional[str]:
        """Get a header value, matching the name case-insensitively."""
        return _header_lookup(self.headers, name)

    def get_accept_header(self) -> str:
        """Get the Accept header, or an empty string if not present."""
        return self.get_header("Accept") or ""

    def get_content_type(self) -> Optional[str]:
        """Get the Content-Type header."""
        return self.get_header("Content-Type")

    def get_path_param(self, name: str) -> Optional[str]:
        if not self.path_params:
            return None
        return self.path_params.get(name)


@dataclass
class Response:
    """Represents an HTTP response.

    ``data`` holds the rendered document (hypermedia or problem) before
    serialization, so callers can inspect it without parsing ``body``.
    """

    status_code: int
    body: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    content_type: Optional[str] = None
    data: Any = None

    def __post_init__(self):
        if self.headers is None:
            self.headers = {}

        if self.content_type:
            self.headers["Content-Type"] = self.content_type

        self._update_content_length()

    def _update_content_length(self):
        assert self.headers is not None
        # Do not include Content-Length for 204 responses
        if self.status_code == 204:
            self.headers.pop("Content-Length", None)
            return
        if self.body is not None:
            content_length = len(self.body.encode("utf-8"))
        else:
            content_length = 0
        self.headers["Content-Length"] = str(content_length)

    def set_body(self, body: Optional[str], content_type: Optional[str] = None):
        """Replace the body, keeping Content-Type and Content-Length in step."""
        assert self.headers is not None
        self.body = body
        if content_type:
            self.content_type = content_type
            self.headers["Content-Type"] = content_type
        self._update_content_length()

    def set_status(self, status_code: int):
        self.status_code = status_code
        self._update_content_length()

    def get_header(self, name: str) -> Optional[str]:
        return _header_lookup(self.headers, name)


@dataclass(frozen=True)
class Success:
    """Successful operation outcome."""

    value: Any


@dataclass(frozen=True)
class Failure:
    """Failed operation outcome, carrying the status and detail to report."""

    status: int
    detail: Union[str, BaseException]


Outcome = Union[Success, Failure]
