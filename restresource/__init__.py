"""
A resource controller framework that turns CRUD backends into REST endpoints.

Requests are dispatched through a small state machine to a pluggable
backend, and outcomes are rendered as HAL-style hypermedia documents or as
problem documents, negotiated from the Accept header.
"""

from http import HTTPStatus

from .application import ResourceApplication
from .backend import EventBackend, Operation, ResourceBackend, ResourceEvent, SharedListeners
from .content_renderers import ContentRenderer, HTMLRenderer, JSONRenderer
from .controller import ResourceController
from .error_models import ProblemDocument
from .exceptions import (
    CreationError,
    DomainError,
    OperationNotImplementedError,
    PatchError,
    ResourceError,
    UpdateError,
)
from .links import Link, LinkBuilder, ServerUrl
from .models import Failure, HTTPMethod, Request, Response, Success
from .options import ResourceOptions
from .pagination import ArrayAdapter, Page, Paginator
from .problem import ProblemRenderer
from .router import Route, RouteStack

__version__ = "0.1.0"
__author__ = "restresource contributors"
__license__ = "MIT"

__all__ = [
    "ResourceApplication",
    "ResourceController",
    "ResourceOptions",
    "ResourceBackend",
    "EventBackend",
    "SharedListeners",
    "ResourceEvent",
    "Operation",
    "Request",
    "Response",
    "HTTPMethod",
    "HTTPStatus",
    "Success",
    "Failure",
    "Link",
    "LinkBuilder",
    "ServerUrl",
    "Paginator",
    "ArrayAdapter",
    "Page",
    "ProblemRenderer",
    "ProblemDocument",
    "ContentRenderer",
    "JSONRenderer",
    "HTMLRenderer",
    "Route",
    "RouteStack",
    "DomainError",
    "ResourceError",
    "CreationError",
    "PatchError",
    "UpdateError",
    "OperationNotImplementedError",
]
