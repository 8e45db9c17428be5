"""
Tests for hypermedia link generation.
"""

import pytest

from restresource import Link, LinkBuilder, Page, RouteStack, ServerUrl
from restresource.links import links_to_hal


@pytest.fixture
def links(router, server_url):
    return LinkBuilder(router, server_url)


@pytest.fixture
def relative_links(router):
    return LinkBuilder(router)


def hrefs(document):
    return {rel: link["href"] for rel, link in document.items()}


class TestItemLinks:

    def test_item_links_are_self_and_up(self, links):
        assert hrefs(links.for_item("resource", "foo")) == {
            "self": "http://localhost.localdomain/resource/foo",
            "up": "http://localhost.localdomain/resource",
        }

    def test_links_are_relative_without_server_url(self, relative_links):
        assert hrefs(relative_links.for_item("resource", "foo")) == {
            "self": "/resource/foo",
            "up": "/resource",
        }

    def test_embedded_item_has_no_up_link(self, links):
        assert hrefs(links.for_embedded_item("resource", "foo")) == {
            "self": "http://localhost.localdomain/resource/foo",
        }

    def test_identifier_is_url_encoded(self, relative_links):
        assert relative_links.for_item("resource", "a b/c")["self"]["href"] == "/resource/a%20b%2Fc"

    def test_numeric_identifier(self, relative_links):
        assert relative_links.for_item("resource", 42)["self"]["href"] == "/resource/42"

    def test_custom_identifier_name(self):
        router = RouteStack()
        router.add_route("users", "/users[/{user_id}]")
        builder = LinkBuilder(router, identifier_name="user_id")

        assert builder.for_item("users", "7")["self"]["href"] == "/users/7"


class TestCollectionLinks:

    def test_plain_collection_has_only_self(self, links):
        assert hrefs(links.for_collection("resource", [{"id": "a"}])) == {
            "self": "http://localhost.localdomain/resource",
        }

    def test_middle_page(self, relative_links):
        page = Page(items=[{"id": "bar"}], total=3, page_size=1, page=2)

        assert hrefs(relative_links.for_collection("resource", page)) == {
            "self": "/resource?page=2",
            "first": "/resource",
            "last": "/resource?page=3",
            "prev": "/resource",
            "next": "/resource?page=3",
        }

    def test_first_page_has_no_prev(self, relative_links):
        page = Page(items=[], total=3, page_size=1, page=1)

        result = hrefs(relative_links.for_collection("resource", page))
        assert result["self"] == "/resource"
        assert "prev" not in result
        assert result["next"] == "/resource?page=2"

    def test_last_page_has_no_next(self, relative_links):
        page = Page(items=[], total=3, page_size=1, page=3)

        result = hrefs(relative_links.for_collection("resource", page))
        assert result["self"] == "/resource?page=3"
        assert result["prev"] == "/resource?page=2"
        assert "next" not in result

    def test_single_page(self, relative_links):
        page = Page(items=[], total=2, page_size=10, page=1)

        assert hrefs(relative_links.for_collection("resource", page)) == {
            "self": "/resource",
            "first": "/resource",
            "last": "/resource",
        }

    def test_query_parameters_are_preserved_with_page_last(self, relative_links):
        page = Page(items=[], total=30, page_size=10, page=2)
        query = {"page": "2", "sort": "name", "order": "asc"}

        result = hrefs(relative_links.for_collection("resource", page, query))
        assert result["self"] == "/resource?sort=name&order=asc&page=2"
        assert result["first"] == "/resource?sort=name&order=asc"
        assert result["next"] == "/resource?sort=name&order=asc&page=3"

    def test_plain_collection_drops_page_query(self, relative_links):
        result = hrefs(relative_links.for_collection("resource", [], {"page": "1", "q": "x"}))
        assert result == {"self": "/resource?q=x"}

    def test_custom_page_parameter(self, relative_links):
        page = Page(items=[], total=3, page_size=1, page=2)

        result = hrefs(relative_links.for_collection("resource", page, {}, page_param="p"))
        assert result["self"] == "/resource?p=2"


class TestServerUrl:

    def test_default_ports_are_omitted(self):
        assert ServerUrl("https", "api.example.com", 443)("/x") == "https://api.example.com/x"
        assert ServerUrl("http", "api.example.com", 80)("/x") == "http://api.example.com/x"

    def test_custom_port_is_kept(self):
        assert ServerUrl("http", "localhost", 8080).base == "http://localhost:8080"

    def test_from_request_headers(self):
        server = ServerUrl.from_request_headers({"Host": "example.org", "X-Forwarded-Proto": "https"})
        assert server.base == "https://example.org"


def test_links_to_hal():
    assert links_to_hal([Link("self", "/a"), Link("up", "/")]) == {
        "self": {"href": "/a"},
        "up": {"href": "/"},
    }
