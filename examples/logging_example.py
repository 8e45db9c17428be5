#!/usr/bin/env python3
"""
Example demonstrating logging in restresource.

This example shows how to configure logging to see different log levels:
- DEBUG: Dispatch state machine transitions
- WARNING: Backend errors turned into problem documents
- ERROR: Unexpected failures answered with 500
"""

import logging

from restresource import EventBackend, HTTPMethod, Request, ResourceApplication, ResourceController
from restresource.exceptions import UpdateError


def setup_logging():
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app():
    """Create an application whose backend fails in different ways."""
    backend = EventBackend()

    @backend.on("fetch")
    def fetch(event):
        return {"id": event.identifier, "message": "Welcome to the logging example!"}

    @backend.on("update")
    def update(event):
        raise UpdateError("Widgets are read-only", status_code=409)

    @backend.on("fetchAll")
    def fetch_all(event):
        return [{"id": "1", "broken": object()}]

    app = ResourceApplication()
    app.add_resource("widgets", "/widgets[/{id}]", ResourceController(backend=backend))
    return app


if __name__ == "__main__":
    # Set up logging to see all messages
    setup_logging()

    app = create_app()
    headers = {"Accept": "application/json", "Content-Type": "application/json"}

    print("\n=== Successful fetch (DEBUG transitions) ===")
    app.execute(Request(method=HTTPMethod.GET, path="/widgets/1", headers=headers))

    print("\n=== Backend error (WARNING) ===")
    app.execute(Request(method=HTTPMethod.PUT, path="/widgets/1", headers=headers, body="{}"))

    print("\n=== Unserializable item (ERROR) ===")
    app.execute(Request(method=HTTPMethod.GET, path="/widgets", headers=headers))
