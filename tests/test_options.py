"""
Tests for controller configuration.
"""

import logging

import pytest
from pydantic import ValidationError

from restresource import HTTPMethod, ResourceController, ResourceOptions


class TestResourceOptions:

    def test_defaults(self):
        options = ResourceOptions()
        assert options.collection_http_options == ("GET", "HEAD", "POST")
        assert options.item_http_options == ("DELETE", "GET", "HEAD", "PATCH", "PUT")
        assert options.page_size == 30
        assert options.identifier_name == "id"
        assert options.item_key == "item"
        assert options.collection_key == "items"
        assert options.include_stack_trace is False

    def test_methods_are_normalized(self):
        options = ResourceOptions(collection_http_options=["get", HTTPMethod.POST, "GET"])
        assert options.collection_http_options == ("GET", "POST")

    def test_single_method_string(self):
        assert ResourceOptions(item_http_options="get").item_http_options == ("GET",)

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            ResourceOptions(item_http_options=["GET", "FETCH"])

    @pytest.mark.parametrize("size", [0, -1])
    def test_page_size_must_be_positive(self, size):
        with pytest.raises(ValidationError):
            ResourceOptions(page_size=size)

    def test_unknown_option_rejected(self):
        with pytest.raises(ValidationError):
            ResourceOptions(pagesize=10)

    def test_options_are_frozen(self):
        options = ResourceOptions()
        with pytest.raises(ValidationError):
            options.page_size = 5

    def test_legacy_item_key(self, caplog):
        with caplog.at_level(logging.WARNING, logger="restresource.options"):
            options = ResourceOptions(resource_key="resource")
        assert options.item_key == "resource"
        assert "deprecated" in caplog.text

    def test_replace_validates(self):
        options = ResourceOptions()
        assert options.replace(page_size=5).page_size == 5
        assert options.page_size == 30
        with pytest.raises(ValidationError):
            options.replace(page_size=0)


class TestControllerOptions:

    def test_keyword_overrides(self):
        controller = ResourceController(page_size=5, item_key="entity")
        assert controller.page_size == 5
        assert controller.config.item_key == "entity"

    def test_http_option_accessors(self):
        controller = ResourceController()
        controller.collection_http_options = ["get"]
        controller.item_http_options = ["get", "delete"]
        assert controller.collection_http_options == ["GET"]
        assert controller.item_http_options == ["GET", "DELETE"]

    def test_custom_keys_shape_documents(self, backend, router):
        controller = ResourceController(
            backend=backend, route="resource", router=router, item_key="entity", collection_key="entities"
        )
        backend.attach("fetch", lambda e: {"id": e.identifier})
        backend.attach("fetchAll", lambda e: [{"id": "a"}])

        assert controller.get("a")["entity"] == {"id": "a"}
        assert controller.get_list()["entities"][0]["entity"] == {"id": "a"}

    def test_custom_identifier_name(self, backend, router, assert_problem):
        controller = ResourceController(backend=backend, route="resource", router=router, identifier_name="uuid")
        backend.attach("create", lambda e: {"id": "ignored"})

        assert_problem(controller.create({}), 422, "item identifier")
