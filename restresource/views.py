"""
Template rendering for documents requested without a JSON Accept header.
"""

from functools import lru_cache
from typing import Any, Dict, List, Optional

from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from jinja2.loaders import BaseLoader

RESOURCE_TEMPLATE = "resource.html"
PROBLEM_TEMPLATE = "problem.html"

_MACROS = """
{%- macro render_value(value) -%}
  {%- if value is mapping -%}
    <dl>{% for key, inner in value.items() %}<dt>{{ key }}</dt><dd>{{ render_value(inner) }}</dd>{% endfor %}</dl>
  {%- elif value is iterable and value is not string -%}
    <ul>{% for inner in value %}<li>{{ render_value(inner) }}</li>{% endfor %}</ul>
  {%- else -%}
    {{ value }}
  {%- endif -%}
{%- endmacro -%}
{%- macro render_links(links) -%}
  <ul class="links">{% for rel, link in links.items() %}<li><a rel="{{ rel }}" href="{{ link.href }}">{{ rel }}</a></li>{% endfor %}</ul>
{%- endmacro -%}
"""

_BUILTIN_TEMPLATES = {
    "macros.html": _MACROS,
    RESOURCE_TEMPLATE: """{% import "macros.html" as m -%}
<!DOCTYPE html>
<html>
<head>
    <title>{{ title }}</title>
</head>
<body>
    <h1>{{ title }}</h1>
    {% if links %}{{ m.render_links(links) }}{% endif %}
    {% if item is not none %}<div class="item">{{ m.render_value(item) }}</div>{% endif %}
    {% if items is not none %}
    <ol class="items">
    {% for entry in items %}
        <li>{% if entry._links %}{{ m.render_links(entry._links) }}{% endif %}{{ m.render_value(entry[item_key]) }}</li>
    {% endfor %}
    </ol>
    {% endif %}
</body>
</html>""",
    PROBLEM_TEMPLATE: """<!DOCTYPE html>
<html>
<head>
    <title>{{ problem.httpStatus }} {{ problem.title }}</title>
</head>
<body>
    <h1>{{ problem.httpStatus }} {{ problem.title }}</h1>
    <p class="detail">{{ problem.detail }}</p>
    <p><a rel="describedby" href="{{ problem.describedBy }}">{{ problem.describedBy }}</a></p>
</body>
</html>""",
}


@lru_cache(maxsize=16)
def get_environment(template_dir: Optional[str] = None) -> Environment:
    """Environment resolving templates from ``template_dir`` first, then built-ins."""
    loaders: List[BaseLoader] = []
    if template_dir:
        loaders.append(FileSystemLoader(template_dir))
    loaders.append(DictLoader(_BUILTIN_TEMPLATES))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(default=True, default_for_string=True),
    )


def render_document(
    document: Dict[str, Any],
    template: Optional[str] = None,
    template_dir: Optional[str] = None,
    item_key: str = "item",
    collection_key: str = "items",
    title: str = "Resource",
) -> str:
    """Render a hypermedia or problem document as HTML."""
    env = get_environment(template_dir)

    if "httpStatus" in document:
        return env.get_template(PROBLEM_TEMPLATE).render(problem=document)

    try:
        template_obj = env.get_template(template or RESOURCE_TEMPLATE)
    except TemplateNotFound as e:
        raise ValueError(
            f"Failed to load template '{template}' from directory '{template_dir}'. "
            f"Original error: {str(e)}"
        )

    return template_obj.render(
        document=document,
        title=title,
        links=document.get("_links", {}),
        item=document.get(item_key),
        items=document.get(collection_key),
        item_key=item_key,
    )
