"""
Logging and Environment Configuration Examples.

Demonstrates server/client logging formats and HTTP_STUB_* configuration.
"""

import os
import tempfile

from src.http_stub import (
    HTTPClient,
    HTTPClientConfig,
    LoggingConfig,
    RequestPattern,
    ResponseTemplate,
    StubServer,
    StubServerConfig,
)
from src.http_stub.core.settings import load_server_config_from_env


def example_1_colored_console():
    """Example 1: Colored console logging on both sides."""
    print("\n" + "="*60)
    print("EXAMPLE 1: Colored Console Logging")
    print("="*60 + "\n")

    logging_config = LoggingConfig.create(level="DEBUG", format="colored")

    with StubServer(StubServerConfig(logging=logging_config)) as server:
        server.given(RequestPattern.create().with_path("/api/users")).respond_with(
            ResponseTemplate.create().with_body('{"Users":[]}')
        )

        config = HTTPClientConfig.create(base_url=server.url, logging=logging_config)
        with HTTPClient(config=config) as client:
            client.get("/api/users")
            client.get("/api/orders")


def example_2_json_file():
    """Example 2: JSON logs in a rotating file."""
    print("\n" + "="*60)
    print("EXAMPLE 2: JSON File Logging")
    print("="*60 + "\n")

    log_path = os.path.join(tempfile.mkdtemp(), "stub.log")
    logging_config = LoggingConfig.create(
        level="INFO",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=log_path,
        extra_fields={"suite": "users-api"},
    )

    with StubServer(StubServerConfig(logging=logging_config)) as server:
        with HTTPClient(base_url=server.url) as client:
            client.get("/api/users")

    with open(log_path, encoding="utf-8") as f:
        for line in f:
            print(line.rstrip())


def example_3_environment():
    """Example 3: Server config from HTTP_STUB_* variables."""
    print("\n" + "="*60)
    print("EXAMPLE 3: Environment Configuration")
    print("="*60 + "\n")

    os.environ["HTTP_STUB_MAX_JOURNAL_ENTRIES"] = "10"
    os.environ["HTTP_STUB_LOG_ENABLED"] = "true"
    os.environ["HTTP_STUB_LOG_FORMAT"] = "text"

    config = load_server_config_from_env()
    print(f"Loaded: {config}")

    with StubServer(config) as server:
        with HTTPClient(base_url=server.url) as client:
            client.get("/ping")
        print(f"Journal entries: {len(server.log_entries)}")


if __name__ == "__main__":
    example_1_colored_console()
    example_2_json_file()
    example_3_environment()
