"""
Operation backends.

A backend exposes one hook per resource operation. Each hook receives a
:class:`ResourceEvent` describing the request and returns the operation's
value, or raises a :class:`~restresource.exceptions.ResourceError`.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .exceptions import OperationNotImplementedError

logger = logging.getLogger(__name__)


class Operation(Enum):
    """Resource operations, valued by their event names."""

    CREATE = "create"
    FETCH = "fetch"
    FETCH_ALL = "fetchAll"
    PATCH = "patch"
    UPDATE = "update"
    DELETE = "delete"
    REPLACE_LIST = "replaceList"

    @property
    def hook_name(self) -> str:
        """Name of the backend method implementing this operation."""
        return _HOOK_NAMES[self]


_HOOK_NAMES = {
    Operation.CREATE: "create",
    Operation.FETCH: "fetch",
    Operation.FETCH_ALL: "fetch_all",
    Operation.PATCH: "patch",
    Operation.UPDATE: "update",
    Operation.DELETE: "delete",
    Operation.REPLACE_LIST: "replace_list",
}


@dataclass(frozen=True)
class ResourceEvent:
    """Input handed to a backend hook."""

    operation: Operation
    identifier: Optional[str] = None
    data: Any = None
    query_params: Mapping[str, str] = field(default_factory=dict)
    identifier_name: str = "id"

    @property
    def name(self) -> str:
        return self.operation.value

    def get_param(self, name: str, default: Any = None) -> Any:
        if name == self.identifier_name:
            return self.identifier if self.identifier is not None else default
        if name == "data":
            return self.data if self.data is not None else default
        return self.query_params.get(name, default)


class ResourceBackend:
    """Base class for backends; override the hooks the resource supports."""

    def create(self, event: ResourceEvent) -> Any:
        raise OperationNotImplementedError(event.name)

    def fetch(self, event: ResourceEvent) -> Any:
        raise OperationNotImplementedError(event.name)

    def fetch_all(self, event: ResourceEvent) -> Any:
        raise OperationNotImplementedError(event.name)

    def patch(self, event: ResourceEvent) -> Any:
        raise OperationNotImplementedError(event.name)

    def update(self, event: ResourceEvent) -> Any:
        raise OperationNotImplementedError(event.name)

    def delete(self, event: ResourceEvent) -> Any:
        raise OperationNotImplementedError(event.name)

    def replace_list(self, event: ResourceEvent) -> Any:
        raise OperationNotImplementedError(event.name)


Listener = Callable[[ResourceEvent], Any]


def _operation(name: Any) -> Operation:
    if isinstance(name, Operation):
        return name
    for operation in Operation:
        if name in (operation.value, operation.hook_name):
            return operation
    raise ValueError(f"Unknown resource operation '{name}'")


class _ListenerQueue:
    """Listeners ordered by descending priority, then attachment order."""

    def __init__(self):
        self._listeners: List[Tuple[int, int, Listener]] = []
        self._counter = 0

    def add(self, listener: Listener, priority: int):
        self._counter += 1
        self._listeners.append((priority, self._counter, listener))
        self._listeners.sort(key=lambda entry: (-entry[0], entry[1]))

    def remove(self, listener: Listener) -> bool:
        before = len(self._listeners)
        self._listeners = [entry for entry in self._listeners if entry[2] is not listener]
        return len(self._listeners) != before

    def entries(self) -> List[Tuple[int, int, Listener]]:
        return list(self._listeners)


class SharedListeners:
    """Listeners registered under namespace strings.

    An :class:`EventBackend` created with matching ``identifiers`` runs
    these alongside its own listeners.
    """

    def __init__(self):
        self._queues: Dict[Tuple[str, Operation], _ListenerQueue] = {}

    def attach(self, namespace: str, operation: Any, listener: Listener, priority: int = 1) -> Listener:
        key = (namespace, _operation(operation))
        self._queues.setdefault(key, _ListenerQueue()).add(listener, priority)
        return listener

    def detach(self, namespace: str, operation: Any, listener: Listener) -> bool:
        queue = self._queues.get((namespace, _operation(operation)))
        return queue.remove(listener) if queue else False

    def entries(self, namespaces: Iterable[str], operation: Operation) -> List[Tuple[int, int, Listener]]:
        entries = []
        for namespace in namespaces:
            queue = self._queues.get((namespace, operation))
            if queue:
                entries.extend(queue.entries())
        return entries


class EventBackend(ResourceBackend):
    """Backend whose operations are implemented by attached listeners.

    Listeners for an operation run by descending priority; the first
    listener returning something other than ``None`` short-circuits the
    chain and its value is the operation's result.

    Example:
        backend = EventBackend()

        @backend.on("fetch")
        def fetch_user(event):
            return users.get(event.identifier)
    """

    def __init__(self, identifiers: Optional[Iterable[str]] = None, shared: Optional[SharedListeners] = None):
        self.identifiers = [type(self).__name__] + list(identifiers or [])
        self.shared = shared
        self._queues: Dict[Operation, _ListenerQueue] = {}

    def attach(self, operation: Any, listener: Listener, priority: int = 1) -> Listener:
        self._queues.setdefault(_operation(operation), _ListenerQueue()).add(listener, priority)
        return listener

    def detach(self, operation: Any, listener: Listener) -> bool:
        queue = self._queues.get(_operation(operation))
        return queue.remove(listener) if queue else False

    def on(self, operation: Any, priority: int = 1):
        """Decorator form of :meth:`attach`."""
        def decorator(func: Listener):
            return self.attach(operation, func, priority)
        return decorator

    def listeners(self, operation: Any) -> List[Listener]:
        operation = _operation(operation)
        entries = []
        queue = self._queues.get(operation)
        if queue:
            entries.extend(queue.entries())
        if self.shared is not None:
            entries.extend(self.shared.entries(self.identifiers, operation))
        # Stable sort keeps local listeners ahead of shared ones on equal priority
        entries.sort(key=lambda entry: -entry[0])
        return [listener for _, _, listener in entries]

    def trigger(self, event: ResourceEvent) -> Any:
        listeners = self.listeners(event.operation)
        if not listeners:
            raise OperationNotImplementedError(event.name)
        logger.debug(f"Triggering {len(listeners)} listener(s) for '{event.name}'")
        for listener in listeners:
            result = listener(event)
            if result is not None:
                return result
        return None

    def create(self, event: ResourceEvent) -> Any:
        return self.trigger(event)

    def fetch(self, event: ResourceEvent) -> Any:
        return self.trigger(event)

    def fetch_all(self, event: ResourceEvent) -> Any:
        return self.trigger(event)

    def patch(self, event: ResourceEvent) -> Any:
        return self.trigger(event)

    def update(self, event: ResourceEvent) -> Any:
        return self.trigger(event)

    def delete(self, event: ResourceEvent) -> Any:
        return self.trigger(event)

    def replace_list(self, event: ResourceEvent) -> Any:
        return self.trigger(event)
