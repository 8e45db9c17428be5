"""
Dispatch state machine for resource requests.

Each request moves through ``IDLE -> METHOD_CHECKED -> OPERATION_INVOKED ->
RENDERED``; any state may stop early with a finished response, but every
path ends in ``RENDERED``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

from .exceptions import BodyParsingError, DomainError
from .models import HTTPMethod, Request, Response

if TYPE_CHECKING:
    from .controller import ResourceController

logger = logging.getLogger(__name__)


class DispatchState(Enum):
    IDLE = "idle"
    METHOD_CHECKED = "method_checked"
    OPERATION_INVOKED = "operation_invoked"
    RENDERED = "rendered"


@dataclass
class DispatchContext:
    """Request-scoped state: the request and the in-flight response."""

    request: Request
    response: Response = field(default_factory=lambda: Response(200))
    identifier: Optional[str] = None

    @property
    def is_item(self) -> bool:
        return self.identifier not in (None, "")

    @property
    def query_params(self) -> Dict[str, str]:
        return self.request.query_params or {}


class StateMachineResult:
    """Result from a state machine decision point."""

    def __init__(self, continue_processing: bool, response: Optional[Response] = None):
        self.continue_processing = continue_processing
        self.response = response


OperationCall = Callable[["ResourceController", DispatchContext, Any], Any]

# (method, targets an item) -> controller operation
OPERATIONS: Dict[Tuple[HTTPMethod, bool], OperationCall] = {
    (HTTPMethod.GET, False): lambda c, ctx, data: c.get_list(ctx),
    (HTTPMethod.HEAD, False): lambda c, ctx, data: c.head(None, ctx),
    (HTTPMethod.POST, False): lambda c, ctx, data: c.create(data, ctx),
    (HTTPMethod.PUT, False): lambda c, ctx, data: c.replace_list(data, ctx),
    (HTTPMethod.GET, True): lambda c, ctx, data: c.get(ctx.identifier, ctx),
    (HTTPMethod.HEAD, True): lambda c, ctx, data: c.head(ctx.identifier, ctx),
    (HTTPMethod.PATCH, True): lambda c, ctx, data: c.patch(ctx.identifier, data, ctx),
    (HTTPMethod.PUT, True): lambda c, ctx, data: c.update(ctx.identifier, data, ctx),
    (HTTPMethod.DELETE, True): lambda c, ctx, data: c.delete(ctx.identifier, ctx),
}

_BODY_METHODS = {HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH}


class DispatchStateMachine:
    """Runs one request through a :class:`ResourceController`."""

    context: DispatchContext

    def __init__(self, controller: "ResourceController"):
        self.controller = controller
        self.state = DispatchState.IDLE
        self.result: Any = None

    def _transition(self, state: DispatchState, result: StateMachineResult):
        status = "CONTINUE" if result.continue_processing else "STOP"
        response_code = result.response.status_code if result.response else "None"
        logger.debug(f"State {self.state.value} -> {state.value}: {status} (response: {response_code})")
        self.state = state

    def process_request(self, request: Request) -> Response:
        """Process a request; configuration errors are raised, never rendered."""
        self.check_configuration()

        identifier = request.get_path_param(self.controller.config.identifier_name)
        self.context = DispatchContext(request=request, identifier=identifier)

        logger.debug(
            f"Dispatching {request.method.value} {request.path} "
            f"({'item ' + str(identifier) if self.context.is_item else 'collection'})"
        )

        result = self.state_method_allowed()
        self._transition(DispatchState.METHOD_CHECKED, result)
        if not result.continue_processing:
            return self._finish(result.response)

        result = self.state_invoke_operation()
        self._transition(DispatchState.OPERATION_INVOKED, result)
        if not result.continue_processing:
            return self._finish(result.response)

        return self._finish(self.state_render())

    def _finish(self, response: Optional[Response]) -> Response:
        response = response or self.context.response
        logger.debug(f"State {self.state.value} -> {DispatchState.RENDERED.value}: {response.status_code}")
        self.state = DispatchState.RENDERED
        return response

    def check_configuration(self):
        if self.controller.backend is None:
            raise DomainError(
                f"{type(self.controller).__name__} requires that a ResourceBackend is composed; none provided"
            )
        if not self.controller.route:
            raise DomainError(
                f"{type(self.controller).__name__} requires that a route name for the resource is composed; none provided"
            )

    def state_method_allowed(self) -> StateMachineResult:
        """Answer OPTIONS and reject methods outside the permitted set."""
        method = self.context.request.method
        is_item = self.context.is_item

        if method == HTTPMethod.OPTIONS:
            return StateMachineResult(False, self.controller.options(self.context))

        permitted = self.controller.config.http_options(is_item)
        if method.value not in permitted or (method, is_item) not in OPERATIONS:
            logger.debug(f"Method {method.value} not permitted; allowed: {', '.join(sorted(permitted))}")
            return StateMachineResult(False, self.controller.method_not_allowed(is_item))

        return StateMachineResult(True)

    def state_invoke_operation(self) -> StateMachineResult:
        request = self.context.request
        data = None
        if request.method in _BODY_METHODS:
            try:
                data = self.controller.parse_body(request)
            except BodyParsingError as e:
                logger.warning(f"Unparsable body for {request.method.value} {request.path}: {e}")
                self.result = self.controller.problem(400, e.message, self.context)
                return StateMachineResult(True)

        operation = OPERATIONS[(request.method, self.context.is_item)]
        self.result = operation(self.controller, self.context, data)

        if isinstance(self.result, Response):
            return StateMachineResult(False, self.result)
        return StateMachineResult(True)

    def state_render(self) -> Response:
        document = self.result
        renderer = self.controller.renderer_for(self.context.request)
        response = self.context.response
        response.data = document
        response.set_body(renderer.render(document), renderer.content_type_for(document))
        return response
