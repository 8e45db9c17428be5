"""
Resource controller: maps HTTP requests onto backend operations and renders
their outcome as hypermedia or problem documents.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import parse_qs

from .backend import Operation, ResourceBackend, ResourceEvent
from .content_renderers import ContentRenderer, HTMLRenderer, JSONRenderer
from .exceptions import BodyParsingError, OperationNotImplementedError, ResourceError
from .links import LinkBuilder, ServerUrl
from .models import Failure, HTTPMethod, Outcome, Request, Response, Success
from .options import ResourceOptions
from .pagination import Page, Paginator
from .problem import ProblemRenderer
from .router import RouteStack
from .state_machine import DispatchContext, DispatchStateMachine

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
OperationResult = Union[Document, Response]


class ResourceController:
    """Dispatches requests for one resource to a :class:`ResourceBackend`.

    Requests without an identifier address the collection; requests with one
    address a single item. Permitted methods are configured separately for
    both targets.

    Example:
        router = RouteStack()
        router.add_route("users", "/users[/{id}]")
        controller = ResourceController(backend=UserBackend(), route="users", router=router)
        response = controller.dispatch(request)
    """

    def __init__(
        self,
        backend: Optional[ResourceBackend] = None,
        route: Optional[str] = None,
        router: Optional[RouteStack] = None,
        server_url: Optional[ServerUrl] = None,
        options: Optional[ResourceOptions] = None,
        **option_overrides: Any,
    ):
        self.backend = backend
        self.route = route
        self.router = router or RouteStack()
        self.server_url = server_url
        config = options or ResourceOptions()
        self.config = config.replace(**option_overrides) if option_overrides else config

    # Configuration accessors

    @property
    def collection_http_options(self) -> List[str]:
        return list(self.config.collection_http_options)

    @collection_http_options.setter
    def collection_http_options(self, methods: Iterable[Any]):
        self.config = self.config.replace(collection_http_options=list(methods))

    @property
    def item_http_options(self) -> List[str]:
        return list(self.config.item_http_options)

    @item_http_options.setter
    def item_http_options(self, methods: Iterable[Any]):
        self.config = self.config.replace(item_http_options=list(methods))

    @property
    def page_size(self) -> int:
        return self.config.page_size

    @page_size.setter
    def page_size(self, size: int):
        self.config = self.config.replace(page_size=size)

    @property
    def links(self) -> LinkBuilder:
        return LinkBuilder(self.router, self.server_url, self.config.identifier_name)

    @property
    def problems(self) -> ProblemRenderer:
        return ProblemRenderer(include_stack_trace=self.config.include_stack_trace)

    @property
    def renderers(self) -> List[ContentRenderer]:
        return [
            JSONRenderer(),
            HTMLRenderer(
                template=self.config.template,
                template_dir=self.config.template_dir,
                item_key=self.config.item_key,
                collection_key=self.config.collection_key,
            ),
        ]

    def renderer_for(self, request: Request) -> ContentRenderer:
        """Pick a renderer from the Accept header; templates are the fallback."""
        renderers = self.renderers
        accept = request.get_accept_header()
        for renderer in renderers:
            if renderer.can_render(accept):
                return renderer
        return renderers[-1]

    # Dispatch

    def dispatch(self, request: Request) -> Response:
        """Run a request through the dispatch state machine."""
        return DispatchStateMachine(self).process_request(request)

    def parse_body(self, request: Request) -> Any:
        """Decode the request body according to its Content-Type."""
        body = request.body
        if body is None or body.strip() == "":
            return None

        content_type = (request.get_content_type() or "").split(";")[0].strip().lower()
        if content_type == "application/x-www-form-urlencoded":
            parsed = parse_qs(body, keep_blank_values=True)
            return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise BodyParsingError(f"Malformed request body: {e.msg}", original_exception=e)

    # Operations

    def create(self, data: Any, context: Optional[DispatchContext] = None) -> OperationResult:
        context = context or self._context(HTTPMethod.POST)
        outcome = self._invoke(Operation.CREATE, context, data=data)
        if isinstance(outcome, Failure):
            return self.problem(outcome.status, outcome.detail, context)

        item = outcome.value
        identifier = self._identifier_of(item)
        if identifier is None:
            return self.problem(422, "No item identifier present following item creation", context)

        document = self._item_document(identifier, item)
        context.response.set_status(201)
        context.response.headers["Location"] = document["_links"]["self"]["href"]
        return document

    def get(self, identifier: str, context: Optional[DispatchContext] = None) -> OperationResult:
        context = context or self._context(HTTPMethod.GET, identifier)
        outcome = self._invoke(Operation.FETCH, context, identifier=identifier)
        if isinstance(outcome, Failure):
            return self.problem(outcome.status, outcome.detail, context)
        if not outcome.value:
            return self.problem(404, "Item not found", context)
        return self._item_document(identifier, outcome.value)

    def get_list(self, context: Optional[DispatchContext] = None) -> OperationResult:
        context = context or self._context(HTTPMethod.GET)
        outcome = self._invoke(Operation.FETCH_ALL, context)
        if isinstance(outcome, Failure):
            return self.problem(outcome.status, outcome.detail, context)
        if not outcome.value:
            return self.problem(404, "Collection not found", context)
        return self._collection_document(outcome.value, context)

    def head(self, identifier: Optional[str] = None, context: Optional[DispatchContext] = None) -> OperationResult:
        """Compute the GET outcome; the body is dropped by the transport."""
        context = context or self._context(HTTPMethod.HEAD, identifier)
        if identifier not in (None, ""):
            return self.get(identifier, context)
        return self.get_list(context)

    def patch(self, identifier: str, data: Any, context: Optional[DispatchContext] = None) -> OperationResult:
        context = context or self._context(HTTPMethod.PATCH, identifier)
        outcome = self._invoke(Operation.PATCH, context, identifier=identifier, data=data)
        if isinstance(outcome, Failure):
            return self.problem(outcome.status, outcome.detail, context)
        return self._item_document(identifier, outcome.value)

    def update(self, identifier: str, data: Any, context: Optional[DispatchContext] = None) -> OperationResult:
        context = context or self._context(HTTPMethod.PUT, identifier)
        outcome = self._invoke(Operation.UPDATE, context, identifier=identifier, data=data)
        if isinstance(outcome, Failure):
            return self.problem(outcome.status, outcome.detail, context)
        return self._item_document(identifier, outcome.value)

    def replace_list(self, data: Any, context: Optional[DispatchContext] = None) -> OperationResult:
        context = context or self._context(HTTPMethod.PUT)
        outcome = self._invoke(Operation.REPLACE_LIST, context, data=data)
        if isinstance(outcome, Failure):
            return self.problem(outcome.status, outcome.detail, context)
        return self._collection_document(outcome.value or [], context)

    def delete(self, identifier: str, context: Optional[DispatchContext] = None) -> OperationResult:
        context = context or self._context(HTTPMethod.DELETE, identifier)
        outcome = self._invoke(Operation.DELETE, context, identifier=identifier)
        if isinstance(outcome, Failure):
            return self.problem(outcome.status, outcome.detail, context)
        if not outcome.value:
            return self.problem(422, "Unable to delete item", context)
        context.response.set_status(204)
        return context.response

    def options(self, context: Optional[DispatchContext] = None) -> Response:
        """Empty 204 response advertising the methods permitted on the target."""
        context = context or self._context(HTTPMethod.OPTIONS)
        response = context.response
        response.set_status(204)
        response.headers["Allow"] = self._allow_header(context.is_item)
        return response

    def method_not_allowed(self, is_item: bool) -> Response:
        return Response(405, headers={"Allow": self._allow_header(is_item)})

    def problem(self, status: int, detail: Any, context: Optional[DispatchContext] = None) -> Document:
        """Render a problem document, setting the in-flight response status."""
        response = context.response if context is not None else None
        return self.problems.generate(status, detail, response=response).to_dict()

    # Helpers

    def _context(self, method: HTTPMethod, identifier: Optional[str] = None) -> DispatchContext:
        path_params = {}
        if identifier not in (None, ""):
            path_params[self.config.identifier_name] = str(identifier)
        request = Request(method=method, path="", headers={}, query_params={}, path_params=path_params)
        return DispatchContext(request=request, identifier=path_params.get(self.config.identifier_name))

    def _invoke(
        self,
        operation: Operation,
        context: DispatchContext,
        identifier: Optional[str] = None,
        data: Any = None,
    ) -> Outcome:
        """Invoke the backend once, turning raised errors into failures."""
        event = ResourceEvent(
            operation=operation,
            identifier=identifier,
            data=data,
            query_params=dict(context.query_params),
            identifier_name=self.config.identifier_name,
        )
        try:
            hook = getattr(self.backend, operation.hook_name, None)
            if hook is None:
                raise OperationNotImplementedError(operation.value)
            return Success(hook(event))
        except ResourceError as e:
            logger.warning(f"{type(e).__name__} during '{operation.value}' on route '{self.route}': {e}")
            return Failure(e.status_code, e)
        except Exception as e:
            logger.warning(f"Unexpected {type(e).__name__} during '{operation.value}' on route '{self.route}': {e}")
            return Failure(500, e)

    def _allow_header(self, is_item: bool) -> str:
        return ", ".join(sorted(self.config.http_options(is_item)))

    def _as_mapping(self, item: Any) -> Any:
        if hasattr(item, "model_dump"):
            return item.model_dump()
        return item

    def _identifier_of(self, item: Any) -> Optional[Any]:
        mapping = self._as_mapping(item)
        if isinstance(mapping, dict):
            value = mapping.get(self.config.identifier_name)
        else:
            value = getattr(mapping, self.config.identifier_name, None)
        if value in (None, ""):
            return None
        return value

    def _item_document(self, identifier: Any, item: Any) -> Document:
        return {
            "_links": self.links.for_item(self.route, identifier),
            self.config.item_key: item,
        }

    def _requested_page(self, context: DispatchContext) -> int:
        value = context.query_params.get(self.config.page_param)
        try:
            return int(value) if value is not None else 1
        except (TypeError, ValueError):
            return 1

    def _collection_document(self, collection: Any, context: DispatchContext) -> Document:
        if isinstance(collection, Paginator):
            collection = collection.page(self._requested_page(context), self.config.page_size)

        items = collection.items if isinstance(collection, Page) else list(collection)
        links = self.links
        entries = []
        for item in items:
            identifier = self._identifier_of(item)
            entries.append({
                "_links": links.for_embedded_item(self.route, identifier) if identifier is not None else {},
                self.config.item_key: item,
            })

        return {
            "_links": links.for_collection(
                self.route, collection, context.query_params, self.config.page_param
            ),
            self.config.collection_key: entries,
        }
