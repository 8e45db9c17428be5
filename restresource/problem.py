"""
Conversion of status codes and errors into problem documents.
"""

import traceback
from typing import Dict, Optional, Union

from .error_models import DEFAULT_DESCRIBED_BY, DEFAULT_TITLE, ProblemDocument
from .models import Response

PROBLEM_STATUS_TITLES: Dict[int, str] = {
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


class ProblemRenderer:
    """Builds :class:`ProblemDocument` instances.

    Args:
        include_stack_trace: When an exception is given as the detail, append
            its traceback and those of its chained causes to the message.
        status_titles: Extra or replacement titles for well-known statuses.
    """

    def __init__(self, include_stack_trace: bool = False, status_titles: Optional[Dict[int, str]] = None):
        self.include_stack_trace = include_stack_trace
        self.status_titles = dict(PROBLEM_STATUS_TITLES)
        if status_titles:
            self.status_titles.update(status_titles)

    def generate(
        self,
        http_status: int,
        detail: Union[str, BaseException],
        described_by: str = DEFAULT_DESCRIBED_BY,
        title: str = DEFAULT_TITLE,
        response: Optional[Response] = None,
    ) -> ProblemDocument:
        """Create a problem document.

        If ``response`` is given its status code is set to ``http_status``.
        """
        if (
            title == DEFAULT_TITLE
            and described_by == DEFAULT_DESCRIBED_BY
            and http_status in self.status_titles
        ):
            title = self.status_titles[http_status]

        if isinstance(detail, BaseException):
            detail = self.detail_from_exception(detail)

        if response is not None:
            response.set_status(http_status)

        return ProblemDocument(
            described_by=described_by,
            title=title,
            http_status=http_status,
            detail=detail,
        )

    __call__ = generate

    def detail_from_exception(self, error: BaseException) -> str:
        if not self.include_stack_trace:
            return str(error)

        message = ""
        current: Optional[BaseException] = error
        seen = set()
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            message += f"{current}\n"
            message += "".join(traceback.format_tb(current.__traceback__)) + "\n"
            current = current.__cause__ or current.__context__
        return message.rstrip()
