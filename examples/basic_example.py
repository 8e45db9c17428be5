"""
Basic usage example for restresource.

This example demonstrates:
- A backend implemented as a ResourceBackend subclass
- Mounting a controller on a named route
- Paginated collections and hypermedia links
- Problem documents for failed operations
- Logging the dispatch state machine
"""

import logging

from pydantic import BaseModel

from restresource import (
    CreationError,
    HTTPMethod,
    Paginator,
    Request,
    ResourceApplication,
    ResourceBackend,
    ResourceController,
    ServerUrl,
)


class User(BaseModel):
    id: str
    name: str
    email: str


# In-memory data store for this example
users_db = {
    "1": User(id="1", name="Alice", email="alice@example.com"),
    "2": User(id="2", name="Bob", email="bob@example.com"),
    "3": User(id="3", name="Carol", email="carol@example.com"),
}


class UserBackend(ResourceBackend):
    """Users kept in a dictionary."""

    def __init__(self, db):
        self.db = db

    def fetch(self, event):
        return self.db.get(event.identifier)

    def fetch_all(self, event):
        return Paginator(list(self.db.values()))

    def create(self, event):
        data = event.data or {}
        if "name" not in data or "email" not in data:
            raise CreationError("Both 'name' and 'email' are required", status_code=422)
        user = User(id=str(len(self.db) + 1), **data)
        self.db[user.id] = user
        return user

    def patch(self, event):
        user = self.db.get(event.identifier)
        if user is None:
            return None
        patched = user.model_copy(update=event.data or {})
        self.db[patched.id] = patched
        return patched

    def delete(self, event):
        return self.db.pop(event.identifier, None) is not None


def create_app():
    app = ResourceApplication(server_url=ServerUrl("https", "api.example.com"))
    app.add_resource("users", "/users[/{id}]", ResourceController(
        backend=UserBackend(users_db),
        page_size=2,
    ))
    return app


def show(app, method, path, body=None, query=None):
    headers = {"Accept": "application/json"}
    if body is not None:
        headers["Content-Type"] = "application/json"
    response = app.execute(Request(method=method, path=path, headers=headers, body=body, query_params=query))
    print(f"{method.value} {path}: {response.status_code}")
    if response.headers.get("Allow"):
        print(f"Allow: {response.headers['Allow']}")
    print(f"Response: {response.body}")
    print()


def main():
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    app = create_app()

    show(app, HTTPMethod.GET, "/users")
    show(app, HTTPMethod.GET, "/users", query={"page": "2"})
    show(app, HTTPMethod.GET, "/users/1")
    show(app, HTTPMethod.GET, "/users/99")
    show(app, HTTPMethod.POST, "/users", body='{"name": "Dave", "email": "dave@example.com"}')
    show(app, HTTPMethod.POST, "/users", body='{"name": "Nobody"}')
    show(app, HTTPMethod.PATCH, "/users/2", body='{"email": "robert@example.com"}')
    show(app, HTTPMethod.DELETE, "/users/1")
    show(app, HTTPMethod.DELETE, "/users/1")
    show(app, HTTPMethod.POST, "/users/2", body="{}")
    show(app, HTTPMethod.OPTIONS, "/users")


if __name__ == "__main__":
    main()
