"""pytest fixtures: ``from src.http_stub.testing.fixtures import *`` in a conftest."""
