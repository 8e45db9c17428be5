"""
Problem document model for the resource framework.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DESCRIBED_BY = "http://www.w3.org/Protocols/rfc2616/rfc2616-sec10.html"
DEFAULT_TITLE = "Unknown"


class ProblemDocument(BaseModel):
    """Problem details for HTTP APIs.

    Serialized with camelCase keys (``describedBy``, ``httpStatus``) so the
    wire format matches the problem API draft, while Python code can use
    snake_case attribute names.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "describedBy": DEFAULT_DESCRIBED_BY,
                "title": "Not Found",
                "httpStatus": 404,
                "detail": "Item not found",
            }
        },
    )

    described_by: str = Field(
        DEFAULT_DESCRIBED_BY,
        alias="describedBy",
        description="URI of a document describing the problem type",
    )

    title: str = Field(
        DEFAULT_TITLE,
        description="Short human-readable summary of the problem type",
    )

    http_status: int = Field(
        ...,
        alias="httpStatus",
        ge=100,
        le=599,
        description="HTTP status code of the response carrying this problem",
    )

    detail: str = Field(
        "",
        description="Human-readable explanation of this occurrence of the problem",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Dump using the wire (camelCase) field names."""
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
