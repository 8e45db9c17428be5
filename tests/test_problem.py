"""
Tests for problem document rendering.
"""

import json

import pytest
from pydantic import ValidationError

from restresource import ProblemDocument, ProblemRenderer, Response
from restresource.error_models import DEFAULT_DESCRIBED_BY


class TestTitles:

    @pytest.mark.parametrize("status,title", [
        (404, "Not Found"),
        (409, "Conflict"),
        (422, "Unprocessable Entity"),
        (500, "Internal Server Error"),
    ])
    def test_known_statuses_use_table_title(self, status, title):
        problem = ProblemRenderer().generate(status, "detail")
        assert problem.title == title
        assert problem.described_by == DEFAULT_DESCRIBED_BY

    def test_unknown_status_defaults(self):
        problem = ProblemRenderer().generate(418, "I'm a teapot")
        assert problem.title == "Unknown"
        assert problem.described_by == DEFAULT_DESCRIBED_BY
        assert problem.http_status == 418

    def test_explicit_title_is_kept(self):
        problem = ProblemRenderer().generate(404, "gone", title="Missing Widget")
        assert problem.title == "Missing Widget"

    def test_explicit_described_by_skips_table(self):
        problem = ProblemRenderer().generate(404, "gone", described_by="https://example.com/problems/gone")
        assert problem.title == "Unknown"
        assert problem.described_by == "https://example.com/problems/gone"

    def test_extra_status_titles(self):
        renderer = ProblemRenderer(status_titles={400: "Bad Request"})
        assert renderer.generate(400, "bad").title == "Bad Request"
        assert renderer.generate(404, "gone").title == "Not Found"


class TestExceptionDetail:

    def test_message_only_by_default(self):
        problem = ProblemRenderer().generate(500, RuntimeError("boom"))
        assert problem.detail == "boom"

    def test_stack_trace_walks_cause_chain(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError as e:
                raise RuntimeError("outer") from e
        except RuntimeError as e:
            error = e

        detail = ProblemRenderer(include_stack_trace=True).generate(500, error).detail
        lines = detail.splitlines()
        assert lines[0] == "outer"
        assert "'inner'" in detail
        assert detail.index("outer") < detail.index("'inner'")
        assert 'File "' in detail
        assert detail == detail.rstrip()

    def test_stack_trace_without_traceback(self):
        detail = ProblemRenderer(include_stack_trace=True).generate(500, ValueError("never raised")).detail
        assert detail == "never raised"


class TestResponseStatus:

    def test_response_status_is_set(self):
        response = Response(200)
        ProblemRenderer().generate(422, "invalid", response=response)
        assert response.status_code == 422

    def test_renderer_is_callable(self):
        assert ProblemRenderer()(404, "gone").http_status == 404


class TestProblemDocument:

    def test_wire_keys(self):
        document = ProblemRenderer().generate(404, "Item not found").to_dict()
        assert document == {
            "describedBy": DEFAULT_DESCRIBED_BY,
            "title": "Not Found",
            "httpStatus": 404,
            "detail": "Item not found",
        }

    def test_round_trip(self):
        problem = ProblemRenderer().generate(409, "already exists")

        parsed = ProblemDocument.model_validate_json(problem.to_json())
        assert parsed.http_status == 409
        assert parsed.title == "Conflict"
        assert parsed.detail == "already exists"
        assert parsed == problem

    def test_parses_wire_format(self):
        payload = json.dumps({"describedBy": "urn:x", "title": "T", "httpStatus": 400, "detail": "d"})
        assert ProblemDocument.model_validate_json(payload).described_by == "urn:x"

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            ProblemDocument(http_status=42)
