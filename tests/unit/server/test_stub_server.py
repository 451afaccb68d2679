"""Tests for StubServer over real loopback HTTP."""

import json
import logging
import socket
import time

import pytest
import requests

from src.http_stub.core.config import StubServerConfig
from src.http_stub.core.logging import LoggingConfig
from src.http_stub.core.exceptions import (
    MappingNotFoundError,
    ServerAlreadyStartedError,
    ServerNotStartedError,
    StubServerError,
)
from src.http_stub.server.matchers import RequestPattern
from src.http_stub.server.messages import ResponseMessage
from src.http_stub.server.responses import ResponseTemplate
from src.http_stub.server.stub_server import NO_MATCH_MESSAGE, StubServer


def _send_raw(port, payload):
    with socket.create_connection(("127.0.0.1", port), timeout=5) as sock:
        sock.sendall(payload)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestLifecycle:

    def test_start_assigns_free_port(self):
        server = StubServer().start()
        try:
            assert server.is_started
            assert server.port > 0
            assert server.url == f"http://127.0.0.1:{server.port}"
            assert server.urls == [server.url]
        finally:
            server.stop()

    def test_two_servers_get_different_ports(self):
        with StubServer() as first, StubServer() as second:
            assert first.port != second.port

    def test_start_twice(self, stub_server):
        with pytest.raises(ServerAlreadyStartedError) as exc_info:
            stub_server.start()

        assert exc_info.value.url == stub_server.url

    def test_stop_is_idempotent(self):
        server = StubServer.create_started()

        server.stop()
        server.stop()

        assert not server.is_started

    def test_url_requires_started_server(self):
        server = StubServer()

        with pytest.raises(ServerNotStartedError):
            server.url
        with pytest.raises(ServerNotStartedError):
            server.port

    def test_restart_after_stop(self):
        server = StubServer.create_started()
        server.stop()

        server.start()
        try:
            assert requests.get(f"{server.url}/x", timeout=5).status_code == 404
        finally:
            server.stop()

    def test_port_in_use(self, stub_server):
        taken = StubServer(StubServerConfig(port=stub_server.port))

        with pytest.raises(StubServerError, match=str(stub_server.port)):
            taken.start()

        assert not taken.is_started

    def test_pooled_connection_fails_after_stop(self):
        server = StubServer.create_started()
        server.given(RequestPattern.create().with_path("/api/users")).respond_with(
            ResponseTemplate.create().with_body('{"Users":[]}')
        )
        url = f"{server.url}/api/users"

        with requests.Session() as session:
            assert session.get(url, timeout=5).status_code == 200
            server.stop()

            with pytest.raises(requests.exceptions.ConnectionError):
                session.get(url, timeout=5)

    def test_repr(self):
        server = StubServer()

        assert repr(server) == "<StubServer stopped mappings=0>"


class TestServing:

    def test_no_mapping_returns_404(self, stub_server):
        response = requests.get(f"{stub_server.url}/api/users", timeout=5)

        assert response.status_code == 404
        assert response.json() == {"Status": NO_MATCH_MESSAGE}
        assert response.headers["Content-Type"] == "application/json"

    def test_priority_over_http(self, stub_server):
        pattern = RequestPattern.create().with_path("/api/users").using_get()
        stub_server.given(pattern).at_priority(2).respond_with(
            ResponseTemplate.create().with_body("fallback")
        )
        stub_server.given(pattern).at_priority(1).respond_with(
            ResponseTemplate.create().with_body("preferred")
        )

        assert requests.get(f"{stub_server.url}/api/users", timeout=5).text == "preferred"

    def test_later_mapping_wins(self, stub_server):
        pattern = RequestPattern.create().with_path("/api/users")
        stub_server.given(pattern).respond_with(ResponseTemplate.create().with_body("first"))
        stub_server.given(pattern).respond_with(ResponseTemplate.create().with_body("second"))

        assert requests.get(f"{stub_server.url}/api/users", timeout=5).text == "second"

    def test_response_headers(self, stub_server):
        stub_server.given(RequestPattern.create().with_path("/h")).respond_with(
            ResponseTemplate.create().with_header("X-Stub", "yes").with_body("ok")
        )

        response = requests.get(f"{stub_server.url}/h", timeout=5)

        assert response.headers["X-Stub"] == "yes"
        assert response.headers["Content-Length"] == "2"
        assert "Content-Type" not in response.headers

    def test_head_has_no_body(self, stub_server):
        stub_server.given(RequestPattern.create().with_path("/h").using_head()).respond_with(
            ResponseTemplate.create().with_body("hidden")
        )

        response = requests.head(f"{stub_server.url}/h", timeout=5)

        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE", "OPTIONS"])
    def test_all_methods_are_served(self, stub_server, method):
        stub_server.given(RequestPattern.create().with_path("/m").using_method(method)).respond_with(
            ResponseTemplate.create().with_status_code(204)
        )

        response = requests.request(method, f"{stub_server.url}/m", timeout=5)

        assert response.status_code == 204

    def test_query_and_header_matching(self, stub_server):
        stub_server.given(
            RequestPattern.create()
            .with_path("/search")
            .with_param("q", "stub")
            .with_header("Authorization", "Bearer *")
        ).respond_with(ResponseTemplate.create().with_body("found"))

        hit = requests.get(
            f"{stub_server.url}/search",
            params={"q": "stub"},
            headers={"Authorization": "Bearer token"},
            timeout=5,
        )
        miss = requests.get(f"{stub_server.url}/search", params={"q": "stub"}, timeout=5)

        assert hit.text == "found"
        assert miss.status_code == 404

    def test_delay(self, stub_server):
        stub_server.given(RequestPattern.create().with_path("/slow")).respond_with(
            ResponseTemplate.create().with_delay(0.2)
        )

        started = time.monotonic()
        requests.get(f"{stub_server.url}/slow", timeout=5)

        assert time.monotonic() - started >= 0.2

    def test_callback_sees_request(self, stub_server):
        def echo(request):
            return ResponseMessage(
                status_code=200,
                headers={"Content-Type": "application/json"},
                body=json.dumps({"method": request.method, "body": request.json()}).encode(),
            )

        stub_server.given(RequestPattern.create().with_path("/echo")).respond_with(
            ResponseTemplate.create().with_callback(echo)
        )

        response = requests.put(f"{stub_server.url}/echo", json={"a": 1}, timeout=5)

        assert response.json() == {"method": "PUT", "body": {"a": 1}}

    def test_failing_callback_returns_500(self, stub_server, caplog):
        def broken(request):
            raise RuntimeError("boom")

        stub_server.given(RequestPattern.create().with_path("/broken")).respond_with(
            ResponseTemplate.create().with_callback(broken)
        )

        with caplog.at_level(logging.ERROR, logger="http_stub"):
            response = requests.get(f"{stub_server.url}/broken", timeout=5)

        assert response.status_code == 500
        assert response.json() == {"Status": "boom"}
        assert "Response template failed" in caplog.text

    def test_chunked_request_body(self, stub_server):
        stub_server.given(
            RequestPattern.create().with_path("/upload").with_body("hello world")
        ).respond_with(ResponseTemplate.create().with_status_code(201))

        response = requests.post(
            f"{stub_server.url}/upload",
            data=iter([b"hello ", b"world"]),
            timeout=5,
        )

        assert response.status_code == 201

    def test_malformed_chunked_body_gets_400(self, stub_server):
        raw = _send_raw(
            stub_server.port,
            b"POST /upload HTTP/1.1\r\n"
            b"Host: 127.0.0.1\r\n"
            b"Transfer-Encoding: chunked\r\n"
            b"\r\n"
            b"zz\r\nhello\r\n0\r\n\r\n",
        )

        head, _, body = raw.partition(b"\r\n\r\n")
        assert head.split(b"\r\n")[0].split()[1] == b"400"
        assert "Status" in json.loads(body)
        assert stub_server.log_entries == []

    def test_invalid_content_length_is_served_without_body(self, stub_server):
        stub_server.given(RequestPattern.create().with_path("/upload")).respond_with(
            ResponseTemplate.create().with_body("ok")
        )

        raw = _send_raw(
            stub_server.port,
            b"POST /upload HTTP/1.1\r\n"
            b"Host: 127.0.0.1\r\n"
            b"Content-Length: abc\r\n"
            b"\r\n",
        )

        assert raw.split(b"\r\n")[0].split()[1] == b"200"
        [entry] = stub_server.log_entries
        assert entry.request.body_bytes == b""

    def test_session_requests_in_sequence(self, stub_server):
        stub_server.given(RequestPattern.create().with_path("/k")).respond_with(
            ResponseTemplate.create().with_body("ok")
        )

        with requests.Session() as session:
            results = [session.get(f"{stub_server.url}/k", timeout=5).text for _ in range(5)]

        assert results == ["ok"] * 5


class TestMappingAdmin:

    def test_mappings_listing_and_delete(self, stub_server):
        mapping = stub_server.given(RequestPattern.create().with_path("/x")).respond_with(
            ResponseTemplate.create()
        )

        assert stub_server.mappings == [mapping]
        assert stub_server.get_mapping(mapping.guid) is mapping

        stub_server.delete_mapping(mapping.guid)

        assert stub_server.mappings == []
        assert requests.get(f"{stub_server.url}/x", timeout=5).status_code == 404
        with pytest.raises(MappingNotFoundError):
            stub_server.delete_mapping(mapping.guid)

    def test_reset(self, stub_server):
        stub_server.given(RequestPattern.create().with_path("/x")).respond_with(
            ResponseTemplate.create()
        )
        requests.get(f"{stub_server.url}/x", timeout=5)

        stub_server.reset()

        assert stub_server.mappings == []
        assert stub_server.log_entries == []


class TestJournal:

    def test_entries_record_request_and_response(self, stub_server):
        mapping = stub_server.given(RequestPattern.create().with_path("/x")).respond_with(
            ResponseTemplate.create().with_status_code(202)
        )

        requests.post(f"{stub_server.url}/x?a=1", data=b"payload", timeout=5)

        [entry] = stub_server.log_entries
        assert entry.request.method == "POST"
        assert entry.request.path == "/x"
        assert entry.request.query == {"a": ["1"]}
        assert entry.request.body == "payload"
        assert entry.request.url == f"{stub_server.url}/x?a=1"
        assert entry.response.status_code == 202
        assert entry.mapping_guid == mapping.guid

    def test_find_and_unmatched(self, stub_server):
        stub_server.given(RequestPattern.create().with_path("/x")).respond_with(
            ResponseTemplate.create()
        )
        requests.get(f"{stub_server.url}/x", timeout=5)
        requests.get(f"{stub_server.url}/y", timeout=5)

        assert len(stub_server.find_log_entries(RequestPattern.create().with_path("/x"))) == 1
        [unmatched] = stub_server.unmatched_log_entries()
        assert unmatched.request.path == "/y"

        stub_server.reset_log_entries()
        assert stub_server.log_entries == []

    @pytest.mark.parametrize("stub_server_config", [StubServerConfig(max_journal_entries=2)])
    def test_bounded_journal(self, stub_server):
        for i in range(3):
            requests.get(f"{stub_server.url}/{i}", timeout=5)

        assert [e.request.path for e in stub_server.log_entries] == ["/1", "/2"]

    @pytest.mark.parametrize("stub_server_config", [StubServerConfig(record_requests=False)])
    def test_recording_disabled(self, stub_server):
        requests.get(f"{stub_server.url}/x", timeout=5)

        assert stub_server.log_entries == []


class TestLogging:

    def test_served_requests_are_logged(self, stub_server, caplog):
        with caplog.at_level(logging.INFO, logger="http_stub"):
            requests.get(f"{stub_server.url}/missing", timeout=5)

        messages = [r.getMessage() for r in caplog.records]
        assert NO_MATCH_MESSAGE in messages
        assert "Request served" in messages

    def test_configured_logger_writes_json_file(self, logging_config_with_file):
        config = StubServerConfig(logging=logging_config_with_file)

        with StubServer(config) as server:
            requests.get(f"{server.url}/missing", timeout=5)

        with open(logging_config_with_file.file_path, encoding="utf-8") as log_file:
            lines = [json.loads(line) for line in log_file]
        served = [line for line in lines if line["message"] == "Request served"]
        assert served[0]["status_code"] == 404
        assert served[0]["path"] == "/missing"
        assert "request_id" in served[0]

    def test_concurrent_servers_log_to_their_own_files(self, tmp_path):
        def server_config(file_name):
            return StubServerConfig(logging=LoggingConfig.create(
                enable_console=False,
                enable_file=True,
                file_path=str(tmp_path / file_name),
            ))

        first = StubServer.create_started(server_config("first.log"))
        try:
            requests.get(f"{first.url}/before", timeout=5)
            with StubServer(server_config("second.log")) as second:
                requests.get(f"{first.url}/during", timeout=5)
                requests.get(f"{second.url}/second", timeout=5)
            requests.get(f"{first.url}/after", timeout=5)
        finally:
            first.stop()

        first_log = (tmp_path / "first.log").read_text(encoding="utf-8")
        second_log = (tmp_path / "second.log").read_text(encoding="utf-8")
        for path in ("/before", "/during", "/after"):
            assert path in first_log
        assert "/second" not in first_log
        assert "/second" in second_log
        assert "/during" not in second_log
