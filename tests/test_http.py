"""
Tests for the HTTP client.
"""

import io
import json
import socket
import threading
import time

import pytest
import requests

from makuwro.api import HTTPClient, MakuwroClient, encode_form
from makuwro.config import MakuwroConfig
from makuwro.exceptions import (
    BadCredentialsError,
    ContentConflictError,
    MakuwroConnectionError,
    RequestTimeoutError,
    UnknownError,
)


class TestRequest:
    """Tests for HTTPClient.request."""

    def test_token_header_attached(self, http, respond):
        http.session.request.return_value = respond(200, {"ok": True})

        http.request("accounts/user")

        kwargs = http.session.request.call_args.kwargs
        assert kwargs["headers"]["token"] == "test-token"
        assert kwargs["url"] == "https://api.makuwro.com/accounts/user"
        assert kwargs["method"] == "GET"
        assert kwargs["timeout"] == 5

    def test_no_token_header_without_token(self, http, respond):
        http.token = None
        http.session.request.return_value = respond(200, {"ok": True})

        http.request("search?query=x")

        assert "token" not in http.session.request.call_args.kwargs["headers"]

    def test_leading_slash_not_duplicated(self, http, respond):
        http.session.request.return_value = respond(200, [])

        http.request("/contents/art/alice")

        assert http.session.request.call_args.kwargs["url"] == "https://api.makuwro.com/contents/art/alice"

    def test_get_parses_body(self, http, respond):
        http.session.request.return_value = respond(200, {"id": "u-1"})

        assert http.request("accounts/user") == {"id": "u-1"}

    def test_non_get_returns_nothing(self, http, respond):
        http.session.request.return_value = respond(200, {"id": "a-1"})

        assert http.request("contents/art/alice/sunset", method="DELETE") is None

    def test_force_body_parse(self, http, respond):
        http.session.request.return_value = respond(200, {"id": "a-1"})

        result = http.request("contents/art/alice", method="POST", force_body_parse=True)

        assert result == {"id": "a-1"}

    def test_empty_success_body(self, http, respond):
        http.session.request.return_value = respond(204)

        assert http.request("accounts/user", method="GET") is None

    def test_error_code_mapped(self, http, respond):
        http.session.request.return_value = respond(409, {"code": 20000, "message": "Slug taken"})

        with pytest.raises(ContentConflictError) as exc_info:
            http.request("contents/art/alice", method="POST")

        assert exc_info.value.status_code == 409

    def test_error_body_parsed_for_any_method(self, http, respond):
        http.session.request.return_value = respond(401, {"code": 10000})

        with pytest.raises(BadCredentialsError):
            http.request("accounts/user/sessions", method="DELETE")

    def test_non_json_error(self, http, respond):
        http.session.request.return_value = respond(502, text="Bad Gateway")

        with pytest.raises(UnknownError) as exc_info:
            http.request("accounts/user")

        assert exc_info.value.status_code == 502

    def test_timeout_not_retried(self, http):
        http.session.request.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(RequestTimeoutError):
            http.request("accounts/user")

        assert http.session.request.call_count == 1

    def test_connection_error(self, http):
        http.session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(MakuwroConnectionError):
            http.request("accounts/user")

    def test_body_sent_as_multipart(self, http, respond):
        http.session.request.return_value = respond(200, {"id": "a-1"})
        body = encode_form({"title": "Sunset"})

        http.request("contents/art/alice", method="POST", body=body)

        assert http.session.request.call_args.kwargs["files"] == {"title": (None, "Sunset")}


@pytest.fixture
def local_server(monkeypatch):
    """Start one-shot HTTP servers on localhost that send a raw reply."""
    for name in ("HTTP_PROXY", "http_proxy", "HTTPS_PROXY", "https_proxy", "ALL_PROXY", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    listeners = []

    def start(reply: bytes, byte_delay: float = 0.0, silent: bool = False) -> str:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        listeners.append(listener)

        def serve():
            try:
                conn, _ = listener.accept()
            except OSError:
                return
            with conn:
                received = b""
                while b"\r\n\r\n" not in received:
                    chunk = conn.recv(4096)
                    if not chunk:
                        return
                    received += chunk
                if silent:
                    time.sleep(5)
                    return
                try:
                    for i in range(len(reply)):
                        conn.sendall(reply[i:i + 1])
                        if byte_delay:
                            time.sleep(byte_delay)
                except OSError:
                    return

        threading.Thread(target=serve, daemon=True).start()
        return f"http://127.0.0.1:{listener.getsockname()[1]}/"

    yield start

    for listener in listeners:
        listener.close()


def http_reply(data) -> bytes:
    body = json.dumps(data).encode("utf-8")
    head = (
        "HTTP/1.1 200 OK\r\n"
        "Content-Type: application/json\r\n"
        f"Content-Length: {len(body)}\r\n"
        "\r\n"
    ).encode("ascii")
    return head + body


class TestDeadline:
    """Tests for the whole-exchange timeout against a real socket."""

    def test_fast_reply(self, local_server):
        url = local_server(http_reply({"id": "u-1", "username": "alice"}))
        client = MakuwroClient(MakuwroConfig(rest_url=url, timeout=2))

        assert client.request("accounts/user") == {"id": "u-1", "username": "alice"}
        client.close()

    def test_trickling_reply_times_out(self, local_server):
        url = local_server(http_reply({"id": "u-1", "username": "alice"}), byte_delay=0.05)
        client = MakuwroClient(MakuwroConfig(rest_url=url, timeout=0.5))

        started = time.monotonic()
        with pytest.raises(RequestTimeoutError):
            client.request("accounts/user")

        assert time.monotonic() - started < 2.0
        assert client.http._session is None

    def test_silent_server_times_out(self, local_server):
        url = local_server(b"", silent=True)
        client = MakuwroClient(MakuwroConfig(rest_url=url, timeout=0.5))

        started = time.monotonic()
        with pytest.raises(RequestTimeoutError):
            client.request("accounts/user")

        assert time.monotonic() - started < 2.0


class TestSession:
    """Tests for session setup."""

    def test_session_does_not_retry(self):
        client = HTTPClient(MakuwroConfig())
        adapter = client.session.get_adapter("https://api.makuwro.com/")

        assert adapter.max_retries.total == 0
        client.close()

    def test_close(self, http):
        session = http.session
        http.close()

        session.close.assert_called_once()
        assert http._session is None

    def test_development_endpoint(self):
        client = HTTPClient(MakuwroConfig(environment="development"))
        assert client.base_url == "http://localhost:3001/"


class TestEncodeForm:
    """Tests for multipart encoding."""

    def test_none(self):
        assert encode_form(None) is None

    def test_strings_untouched(self):
        assert encode_form({"title": "Hi"}) == {"title": (None, "Hi")}

    def test_nested_object_as_json(self):
        form = encode_form({"meta": {"tags": ["a", "b"], "draft": True}})

        assert form["meta"] == (None, json.dumps({"tags": ["a", "b"], "draft": True}))
        assert "[object Object]" not in form["meta"][1]

    def test_scalars_as_json(self):
        form = encode_form({"count": 3, "public": False, "missing": None})

        assert form["count"] == (None, "3")
        assert form["public"] == (None, "false")
        assert form["missing"] == (None, "null")

    def test_binary_untouched(self):
        data = b"\x89PNG"
        stream = io.BytesIO(b"raw")
        form = encode_form({"image": data, "file": stream})

        assert form["image"][1] is data
        assert form["file"][1] is stream
