"""
Hypermedia link generation for resource items and collections.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .pagination import Page
from .router import RouteStack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Link:
    """A single relation/href pair."""

    rel: str
    href: str


class ServerUrl:
    """Resolves scheme and host so links can be made absolute."""

    def __init__(self, scheme: str = "http", host: str = "localhost", port: Optional[int] = None):
        self.scheme = scheme
        self.host = host
        self.port = port

    @classmethod
    def from_request_headers(cls, headers: Mapping[str, str], scheme: str = "http") -> "ServerUrl":
        """Build from the Host header, falling back to localhost."""
        lowered = {key.lower(): value for key, value in headers.items()}
        host = lowered.get("host", "localhost")
        scheme = lowered.get("x-forwarded-proto", scheme)
        return cls(scheme=scheme, host=host)

    @property
    def base(self) -> str:
        default_port = {"http": 80, "https": 443}.get(self.scheme)
        if self.port is None or self.port == default_port:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"

    def __call__(self, path: str) -> str:
        return self.base + path


def links_to_hal(links: List[Link]) -> Dict[str, Dict[str, str]]:
    """Serialize links into the HAL ``_links`` shape."""
    return {link.rel: {"href": link.href} for link in links}


class LinkBuilder:
    """Computes ``_links`` for items and collections mounted on a named route."""

    def __init__(self, router: RouteStack, server_url: Optional[ServerUrl] = None, identifier_name: str = "id"):
        self.router = router
        self.server_url = server_url
        self.identifier_name = identifier_name

    def _href(self, route: str, identifier: Any = None, query: Optional[List[Tuple[str, str]]] = None) -> str:
        params = {}
        if identifier is not None:
            params[self.identifier_name] = str(identifier)
        path = self.router.assemble(route, params, query)
        if self.server_url is not None:
            return self.server_url(path)
        return path

    def item_links(self, route: str, identifier: Any, include_up: bool = True) -> List[Link]:
        links = [Link("self", self._href(route, identifier))]
        if include_up:
            links.append(Link("up", self._href(route)))
        return links

    def for_item(self, route: str, identifier: Any) -> Dict[str, Dict[str, str]]:
        """Links for a single item: ``self`` and ``up``."""
        return links_to_hal(self.item_links(route, identifier))

    def for_embedded_item(self, route: str, identifier: Any) -> Dict[str, Dict[str, str]]:
        """Links for an item embedded in a collection: ``self`` only."""
        return links_to_hal(self.item_links(route, identifier, include_up=False))

    def collection_links(
        self,
        route: str,
        collection: Any,
        query_params: Optional[Mapping[str, str]] = None,
        page_param: str = "page",
    ) -> List[Link]:
        # Page is always emitted last so hrefs are stable
        base_query = [
            (key, str(value)) for key, value in (query_params or {}).items() if key != page_param
        ]

        def href(page: int) -> str:
            query = list(base_query)
            if page > 1:
                query.append((page_param, str(page)))
            return self._href(route, query=query)

        if not isinstance(collection, Page):
            return [Link("self", href(1))]

        current = collection.page
        last = collection.last_page
        logger.debug(f"Building pagination links for route '{route}': page {current} of {last}")

        links = [
            Link("self", href(current)),
            Link("first", href(1)),
            Link("last", href(last)),
        ]
        if collection.has_prev:
            links.append(Link("prev", href(current - 1)))
        if collection.has_next:
            links.append(Link("next", href(current + 1)))
        return links

    def for_collection(
        self,
        route: str,
        collection: Any,
        query_params: Optional[Mapping[str, str]] = None,
        page_param: str = "page",
    ) -> Dict[str, Dict[str, str]]:
        """Links for a collection, with pagination relations for a :class:`Page`."""
        return links_to_hal(self.collection_links(route, collection, query_params, page_param))
