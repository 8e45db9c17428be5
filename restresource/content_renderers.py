"""
Content renderers for hypermedia and problem documents.
"""

import json
from typing import Any, Dict, Optional

from .views import render_document

HAL_JSON = "application/hal+json"
PROBLEM_JSON = "application/api-problem+json"
HTML = "text/html"

_STRUCTURED_TYPES = ("application/json", HAL_JSON, PROBLEM_JSON)


def _accept_types(accept_header: str) -> list:
    return [t.strip().split(";")[0].strip().lower() for t in accept_header.split(",") if t.strip()]


def accepts_structured_data(accept_header: Optional[str]) -> bool:
    """True when the Accept header explicitly asks for a JSON representation."""
    if not accept_header:
        return False
    for media_type in _accept_types(accept_header):
        if media_type in _STRUCTURED_TYPES:
            return True
        if media_type.startswith("application/") and media_type.endswith("+json"):
            return True
    return False


class ContentRenderer:
    """Base class for content renderers."""

    def __init__(self, media_type: str):
        self.media_type = media_type

    def can_render(self, accept_header: str) -> bool:
        """Check if this renderer can handle the given Accept header."""
        if not accept_header or accept_header == "*/*":
            return True
        accept_types = _accept_types(accept_header)
        return self.media_type in accept_types or "*/*" in accept_types

    def content_type_for(self, document: Dict[str, Any]) -> str:
        return self.media_type

    def render(self, document: Dict[str, Any]) -> str:
        """Render the document as this content type."""
        raise NotImplementedError


class JSONRenderer(ContentRenderer):
    """Structured-data renderer.

    Success documents are labelled ``application/hal+json`` and problem
    documents ``application/api-problem+json``.
    """

    def __init__(self):
        super().__init__(HAL_JSON)

    def can_render(self, accept_header: str) -> bool:
        return accepts_structured_data(accept_header)

    def content_type_for(self, document: Dict[str, Any]) -> str:
        if "httpStatus" in document:
            return PROBLEM_JSON
        return HAL_JSON

    def render(self, document: Dict[str, Any]) -> str:
        return json.dumps(self._serialize(document))

    def _serialize(self, data: Any) -> Any:
        """Convert Pydantic models to dictionaries for JSON serialization."""
        if hasattr(data, "model_dump"):
            return data.model_dump(mode="json", by_alias=True)
        elif isinstance(data, (list, tuple)):
            return [self._serialize(item) for item in data]
        elif isinstance(data, dict):
            return {key: self._serialize(value) for key, value in data.items()}
        else:
            return data


class HTMLRenderer(ContentRenderer):
    """Template-based renderer used when no structured format is requested."""

    def __init__(
        self,
        template: Optional[str] = None,
        template_dir: Optional[str] = None,
        item_key: str = "item",
        collection_key: str = "items",
    ):
        super().__init__(HTML)
        self.template = template
        self.template_dir = template_dir
        self.item_key = item_key
        self.collection_key = collection_key

    def render(self, document: Dict[str, Any]) -> str:
        return render_document(
            document,
            template=self.template,
            template_dir=self.template_dir,
            item_key=self.item_key,
            collection_key=self.collection_key,
        )
