"""
Basic Stub Server Usage Examples

Demonstrates registering stubs and calling them with both clients.
"""

import asyncio

from src.http_stub import (
    AsyncHTTPClient,
    HTTPClient,
    NewUser,
    RequestPattern,
    ResponseTemplate,
    StubServer,
    User,
)


def get_users():
    """GET /api/users answered by a stub."""
    print("\n=== GET /api/users ===")

    with StubServer() as server:
        server.given(
            RequestPattern.create().with_path("/api/users").using_get()
        ).respond_with(
            ResponseTemplate.create().with_status_code(200).with_body('{"Users":[]}')
        )

        with HTTPClient(base_url=server.url) as client:
            response = client.get("/api/users")

        print(f"Status: {response.status_code}")
        print(f"Body: {response.text}")


def create_user():
    """POST /api/users with an exact JSON body."""
    print("\n=== POST /api/users ===")

    with StubServer() as server:
        server.given(
            RequestPattern.create()
            .with_path("/api/users")
            .using_post()
            .with_body('{"Name":"John Doe","Email":"johndoe@example.com"}')
        ).respond_with(
            ResponseTemplate.create()
            .with_status_code(201)
            .with_body('{"Id":1,"Name":"John Doe","Email":"johndoe@example.com"}')
        )

        with HTTPClient(base_url=server.url) as client:
            response = client.post_json(
                "/api/users", NewUser(name="John Doe", email="johndoe@example.com")
            )

        print(f"Status: {response.status_code}")
        print(f"Created: {User.model_validate_json(response.text)}")


def unmatched_request():
    """A request nothing was registered for."""
    print("\n=== No matching mapping ===")

    with StubServer() as server:
        with HTTPClient(base_url=server.url) as client:
            response = client.get("/api/orders")

        print(f"Status: {response.status_code}")
        print(f"Body: {response.text}")
        print(f"Unmatched requests: {len(server.unmatched_log_entries())}")


def priorities():
    """Lower priority value wins; a catch-all stub answers the rest."""
    print("\n=== Priorities ===")

    with StubServer() as server:
        server.given(RequestPattern.create().with_path("/api/*")).at_priority(10).respond_with(
            ResponseTemplate.create().with_status_code(503).with_body_as_json({"Status": "down"})
        )
        server.given(RequestPattern.create().with_path("/api/health")).at_priority(1).respond_with(
            ResponseTemplate.create().with_body_as_json({"Status": "ok"})
        )

        with HTTPClient(base_url=server.url) as client:
            print(f"/api/health -> {client.get('/api/health').text}")
            print(f"/api/users  -> {client.get('/api/users').status_code}")


async def async_client():
    """Same GET through the httpx client."""
    print("\n=== Async client ===")

    with StubServer() as server:
        server.given(
            RequestPattern.create().with_path("/api/users").using_get()
        ).respond_with(
            ResponseTemplate.create().with_body('{"Users":[]}')
        )

        async with AsyncHTTPClient(base_url=server.url) as client:
            response = await client.get("/api/users")

        print(f"Status: {response.status_code}")
        print(f"Body: {response.text}")


if __name__ == "__main__":
    print("=" * 60)
    print("HTTP Stub - Basic Usage Examples")
    print("=" * 60)

    get_users()
    create_user()
    unmatched_request()
    priorities()
    asyncio.run(async_client())

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60)
