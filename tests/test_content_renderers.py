"""
Tests for content negotiation and document renderers.
"""

import json

import pytest
from pydantic import BaseModel

from restresource import HTMLRenderer, JSONRenderer
from restresource.content_renderers import accepts_structured_data


class Widget(BaseModel):
    id: str
    name: str


@pytest.mark.parametrize("accept,expected", [
    ("application/json", True),
    ("application/hal+json", True),
    ("application/vnd.example.v1+json", True),
    ("text/html, application/json;q=0.9", True),
    ("APPLICATION/JSON", True),
    ("text/html", False),
    ("*/*", False),
    ("", False),
    (None, False),
])
def test_accepts_structured_data(accept, expected):
    assert accepts_structured_data(accept) is expected


class TestJSONRenderer:

    def test_content_types(self):
        renderer = JSONRenderer()
        assert renderer.content_type_for({"_links": {}}) == "application/hal+json"
        assert renderer.content_type_for({"httpStatus": 404}) == "application/api-problem+json"

    def test_serializes_pydantic_items(self):
        document = {"_links": {}, "item": Widget(id="w1", name="Sprocket")}
        assert json.loads(JSONRenderer().render(document)) == {
            "_links": {},
            "item": {"id": "w1", "name": "Sprocket"},
        }


class TestHTMLRenderer:

    def test_item_document(self):
        document = {
            "_links": {"self": {"href": "/resource/foo"}, "up": {"href": "/resource"}},
            "item": {"id": "foo", "tags": ["a", "b"]},
        }
        html = HTMLRenderer().render(document)
        assert '<a rel="self" href="/resource/foo">self</a>' in html
        assert '<a rel="up" href="/resource">up</a>' in html
        assert "<dt>tags</dt>" in html
        assert "<li>a</li>" in html

    def test_collection_document(self):
        document = {
            "_links": {"self": {"href": "/resource"}},
            "items": [{"_links": {"self": {"href": "/resource/foo"}}, "item": {"id": "foo"}}],
        }
        html = HTMLRenderer().render(document)
        assert 'class="items"' in html
        assert "/resource/foo" in html

    def test_values_are_escaped(self):
        html = HTMLRenderer().render({"_links": {}, "item": {"id": "<script>"}})
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_problem_document(self):
        html = HTMLRenderer().render({
            "describedBy": "http://example.com/problem",
            "title": "Conflict",
            "httpStatus": 409,
            "detail": "Already exists",
        })
        assert "409 Conflict" in html
        assert "Already exists" in html

    def test_custom_template(self, tmp_path):
        (tmp_path / "widget.html").write_text("Widget {{ item.name }} at {{ links.self.href }}")
        renderer = HTMLRenderer(template="widget.html", template_dir=str(tmp_path))

        html = renderer.render({"_links": {"self": {"href": "/w/1"}}, "item": {"name": "Sprocket"}})
        assert html == "Widget Sprocket at /w/1"

    def test_missing_template(self, tmp_path):
        renderer = HTMLRenderer(template="nope.html", template_dir=str(tmp_path))
        with pytest.raises(ValueError, match="nope.html"):
            renderer.render({"_links": {}, "item": {}})
