"""
Application that mounts resource controllers on named routes.
"""

import logging
from typing import Dict, Optional

from .content_renderers import HTMLRenderer, JSONRenderer, accepts_structured_data
from .controller import ResourceController
from .exceptions import DomainError
from .links import ServerUrl
from .models import HTTPMethod, Request, Response
from .problem import ProblemRenderer
from .router import RouteStack

logger = logging.getLogger(__name__)


class ResourceApplication:
    """Routes requests to the controller mounted on the matching route.

    Example:
        app = ResourceApplication(server_url=ServerUrl("https", "api.example.com"))
        app.add_resource("users", "/users[/{id}]", ResourceController(backend=UserBackend()))
        response = app.execute(Request(HTTPMethod.GET, "/users/42", {"Accept": "application/json"}))
    """

    def __init__(self, server_url: Optional[ServerUrl] = None, router: Optional[RouteStack] = None):
        self.server_url = server_url
        self.router = router or RouteStack()
        self._controllers: Dict[str, ResourceController] = {}

    def add_resource(self, name: str, template: str, controller: ResourceController) -> ResourceController:
        """Mount a controller; the route name also becomes the controller's route."""
        self.router.add_route(name, template)
        controller.route = name
        controller.router = self.router
        if controller.server_url is None:
            controller.server_url = self.server_url
        self._controllers[name] = controller
        return controller

    def controller(self, name: str) -> ResourceController:
        return self._controllers[name]

    def execute(self, request: Request) -> Response:
        """Execute a request, dropping the body of HEAD responses."""
        try:
            response = self._dispatch(request)
        except DomainError:
            raise
        except Exception as e:
            logger.exception(f"Unhandled exception processing {request.method.value} {request.path}: {e}")
            response = self._problem_response(request, 500, "Internal server error")

        if request.method == HTTPMethod.HEAD:
            content_length = response.get_header("Content-Length")
            response.body = None
            if content_length is not None:
                response.headers["Content-Length"] = content_length
        return response

    def _dispatch(self, request: Request) -> Response:
        match = self.router.match(request.path)
        if match is None:
            logger.debug(f"No resource mounted at {request.path}")
            return self._problem_response(request, 404, f"No resource found at {request.path}")

        route, path_params = match
        controller = self._controllers.get(route.name)
        if controller is None:
            return self._problem_response(request, 404, f"No resource found at {request.path}")
        request.path_params = {**(request.path_params or {}), **path_params}
        return controller.dispatch(request)

    def _problem_response(self, request: Request, status: int, detail: str) -> Response:
        document = ProblemRenderer().generate(status, detail).to_dict()
        renderer = JSONRenderer() if accepts_structured_data(request.get_accept_header()) else HTMLRenderer()
        return Response(status, renderer.render(document), content_type=renderer.content_type_for(document), data=document)
