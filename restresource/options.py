"""
Controller configuration.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import HTTPMethod

logger = logging.getLogger(__name__)

_KNOWN_METHODS = {method.value for method in HTTPMethod}


class ResourceOptions(BaseModel):
    """Validated, read-only settings for a :class:`ResourceController`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    collection_http_options: Tuple[str, ...] = Field(
        ("GET", "HEAD", "POST"),
        description="Methods permitted on the collection URL",
    )
    item_http_options: Tuple[str, ...] = Field(
        ("DELETE", "GET", "HEAD", "PATCH", "PUT"),
        description="Methods permitted on an item URL",
    )
    page_size: int = Field(30, ge=1, description="Items per page of a paginated collection")
    page_param: str = Field("page", min_length=1)
    identifier_name: str = Field("id", min_length=1)
    item_key: str = Field(
        "item",
        min_length=1,
        validation_alias=AliasChoices("item_key", "resource_key"),
        description="Key of the embedded item in hypermedia documents",
    )
    collection_key: str = Field("items", min_length=1)
    include_stack_trace: bool = False
    template: Optional[str] = Field(None, description="Jinja2 template used for non-JSON rendering")
    template_dir: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _warn_legacy_keys(cls, data: Any) -> Any:
        if isinstance(data, dict) and "resource_key" in data:
            logger.warning("The 'resource_key' option is deprecated; use 'item_key' instead")
        return data

    @field_validator("collection_http_options", "item_http_options", mode="before")
    @classmethod
    def _normalize_methods(cls, value: Any) -> Tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        methods = []
        for method in value:
            if isinstance(method, HTTPMethod):
                method = method.value
            method = str(method).upper()
            if method not in _KNOWN_METHODS:
                raise ValueError(f"Unknown HTTP method '{method}'")
            if method not in methods:
                methods.append(method)
        return tuple(methods)

    def http_options(self, is_item: bool) -> Tuple[str, ...]:
        return self.item_http_options if is_item else self.collection_http_options

    def replace(self, **changes: Any) -> "ResourceOptions":
        """Return a validated copy with some settings changed."""
        data: Dict[str, Any] = self.model_dump()
        data.update(changes)
        return ResourceOptions(**data)
