"""
Shared fixtures for resource controller tests.

The default setup mirrors a typical mount: a ``resource`` route at
``/resource[/{id}]``, absolute links on ``http://localhost.localdomain`` and
an event-driven backend tests attach listeners to.
"""

import json
from typing import Any, Dict, Optional

import pytest

from restresource import (
    EventBackend,
    HTTPMethod,
    Request,
    ResourceController,
    RouteStack,
    ServerUrl,
)


@pytest.fixture
def router():
    router = RouteStack()
    router.add_route("resource", "/resource[/{id}]")
    return router


@pytest.fixture
def server_url():
    return ServerUrl(scheme="http", host="localhost.localdomain")


@pytest.fixture
def backend():
    return EventBackend()


@pytest.fixture
def controller(backend, router, server_url):
    return ResourceController(backend=backend, route="resource", router=router, server_url=server_url)


@pytest.fixture
def make_request():
    """Factory for requests addressed to the ``resource`` route."""

    def factory(
        method: HTTPMethod,
        identifier: Optional[str] = None,
        query: Optional[Dict[str, str]] = None,
        body: Any = None,
        accept: Optional[str] = "application/json",
        content_type: Optional[str] = "application/json",
    ) -> Request:
        headers = {}
        if accept:
            headers["Accept"] = accept
        if content_type and body is not None:
            headers["Content-Type"] = content_type
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        path = "/resource" if identifier is None else f"/resource/{identifier}"
        return Request(
            method=method,
            path=path,
            headers=headers,
            body=body,
            query_params=query or {},
            path_params={"id": identifier} if identifier is not None else {},
        )

    return factory


@pytest.fixture
def assert_problem():
    """Assert that a result is a problem document with the given status and detail."""

    def check(result: Any, expected_status: int, expected_detail: str):
        assert isinstance(result, dict)
        assert "httpStatus" in result
        assert result["httpStatus"] == expected_status
        assert "detail" in result
        assert expected_detail in result["detail"]

    return check
