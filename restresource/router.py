"""Named routes with URL template expansion and path matching.

Templates use ``{param}`` placeholders and square brackets for optional
sections, e.g. ``/resource[/{id}]``. An optional section is emitted on
assembly only when every parameter inside it has a value.
"""

import re
from typing import Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, unquote, urlencode

from .exceptions import RouteNotFoundError

_PARAM = re.compile(r"\{(\w+)\}")


class Route:
    """A single URL template."""

    def __init__(self, name: str, template: str):
        self.name = name
        self.template = template
        self.parts = self._parse(template)
        self.pattern = re.compile("^" + self._regex(self.parts) + "/?$")

    @staticmethod
    def _parse(template: str) -> List[Union[str, list]]:
        """Split a template into literal strings and nested optional lists."""
        root: List[Union[str, list]] = []
        stack = [root]
        buffer = ""
        for char in template:
            if char == "[":
                if buffer:
                    stack[-1].append(buffer)
                    buffer = ""
                optional: List[Union[str, list]] = []
                stack[-1].append(optional)
                stack.append(optional)
            elif char == "]":
                if len(stack) == 1:
                    raise ValueError(f"Unbalanced ']' in route template '{template}'")
                if buffer:
                    stack[-1].append(buffer)
                    buffer = ""
                stack.pop()
            else:
                buffer += char
        if len(stack) != 1:
            raise ValueError(f"Unbalanced '[' in route template '{template}'")
        if buffer:
            root.append(buffer)
        return root

    def _regex(self, parts: List[Union[str, list]]) -> str:
        regex = ""
        for part in parts:
            if isinstance(part, list):
                regex += f"(?:{self._regex(part)})?"
                continue
            position = 0
            for match in _PARAM.finditer(part):
                regex += re.escape(part[position:match.start()])
                regex += f"(?P<{match.group(1)}>[^/]+)"
                position = match.end()
            regex += re.escape(part[position:])
        return regex

    def _expand(self, parts: List[Union[str, list]], params: Mapping[str, str], optional: bool) -> Optional[str]:
        path = ""
        for part in parts:
            if isinstance(part, list):
                path += self._expand(part, params, True) or ""
                continue
            missing = [name for name in _PARAM.findall(part) if params.get(name) in (None, "")]
            if missing:
                if optional:
                    return None
                raise RouteNotFoundError(f"Route '{self.name}' requires parameter(s): {', '.join(missing)}")
            path += _PARAM.sub(lambda m: quote(str(params[m.group(1)]), safe=""), part)
        return path

    def assemble(self, params: Optional[Mapping[str, str]] = None, query: Optional[List[Tuple[str, str]]] = None) -> str:
        """Expand the template into a path, appending an encoded query string."""
        path = self._expand(self.parts, params or {}, False) or "/"
        if query:
            path += "?" + urlencode(query)
        return path

    def match(self, path: str) -> Optional[Dict[str, str]]:
        match = self.pattern.match(path)
        if match is None:
            return None
        return {name: unquote(value) for name, value in match.groupdict().items() if value is not None}


class RouteStack:
    """Ordered collection of named routes."""

    def __init__(self):
        self._routes: Dict[str, Route] = {}

    def add_route(self, name: str, template: str) -> Route:
        route = Route(name, template)
        self._routes[name] = route
        return route

    def get(self, name: str) -> Route:
        try:
            return self._routes[name]
        except KeyError:
            raise RouteNotFoundError(f"No route named '{name}'")

    def has_route(self, name: str) -> bool:
        return name in self._routes

    def assemble(
        self,
        name: str,
        params: Optional[Mapping[str, str]] = None,
        query: Optional[List[Tuple[str, str]]] = None,
    ) -> str:
        return self.get(name).assemble(params, query)

    def match(self, path: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        """Find the first route matching the path (query string ignored)."""
        path = path.split("?", 1)[0]
        for route in self._routes.values():
            params = route.match(path)
            if params is not None:
                return route, params
        return None
