"""Shared fixtures: document roots, configurations and socket-pair sessions."""

import socket
import threading
from collections import namedtuple

import pytest

from static_server.config import ServerConfig
from static_server.session import ConnectionSession

LISTENING_ADDRESS = ("127.0.0.1", 8080)

ParsedResponse = namedtuple("ParsedResponse", ["code", "reason", "headers", "body"])


@pytest.fixture
def docroot(tmp_path):
    """Document root with one virtual host, example.com."""
    root = tmp_path / "www"
    site = root / "example.com"
    (site / "docs").mkdir(parents=True)
    (site / "index.html").write_bytes(b"<h1>Hi</h1>")
    (site / "file.xyz").write_bytes(b"\x00\x01binary\xff")
    (site / "style.css").write_bytes(b"body { color: red; }")
    (site / "logo.PNG").write_bytes(b"\x89PNG\r\n\x1a\n")
    (site / "notes.txt").write_bytes("café".encode("utf-8"))
    (site / "README").write_bytes(b"no extension")
    (site / "docs" / "index.html").write_bytes(b"<p>docs</p>")
    (tmp_path / "secret.txt").write_bytes(b"top secret")
    return root


@pytest.fixture
def make_config(docroot):
    """Build a ServerConfig rooted at the test document root."""

    def _make(**overrides):
        settings = {
            "document_root": str(docroot),
            "keep_alive_timeout": 2,
            "request_timeout": 2,
        }
        settings.update(overrides)
        return ServerConfig(**settings)

    return _make


def _recv_all(sock):
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def serve(make_config):
    """Run a ConnectionSession over a socket pair.

    Sends `payload`, reads until the session closes the connection, and
    returns the raw bytes received together with the finished session.
    """

    def _serve(payload, config=None, close_write=True):
        server_sock, client_sock = socket.socketpair()
        client_sock.settimeout(10)
        session = ConnectionSession(
            server_sock, ("127.0.0.1", 50000), LISTENING_ADDRESS, config or make_config()
        )
        worker = threading.Thread(target=session.run)
        worker.start()
        try:
            if payload:
                client_sock.sendall(payload)
            if close_write:
                client_sock.shutdown(socket.SHUT_WR)
            data = _recv_all(client_sock)
            worker.join(10)
            assert not worker.is_alive()
        finally:
            client_sock.close()
            server_sock.close()
        return data, session

    return _serve


def _parse_responses(data):
    responses = []
    while data:
        head, sep, rest = data.partition(b"\r\n\r\n")
        assert sep, "incomplete response head"
        lines = head.decode("latin-1").split("\r\n")
        _version, code, reason = lines[0].split(" ", 2)
        headers = {}
        for line in lines[1:]:
            name, _, value = line.partition(":")
            headers[name.strip()] = value.strip()
        length = int(headers["Content-Length"])
        body, data = rest[:length], rest[length:]
        assert len(body) == length
        responses.append(ParsedResponse(int(code), reason, headers, body))
    return responses


@pytest.fixture
def parse_responses():
    """Split a byte stream into responses framed by Content-Length."""
    return _parse_responses
