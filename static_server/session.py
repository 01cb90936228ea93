#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Connection Session Module for the Static File Server
----------------------------------------------------
Serves every request on one client connection (HTTP keep-alive) until
the client asks to close, goes idle, reaches the request limit, or the
connection fails.
"""

import enum
import socket
import logging

from .exceptions import ConnectionIOError, MalformedRequest
from .handler import RequestHandler
from .request import RequestParser, make_request, wants_close
from .response import build_error_response


class SessionState(enum.Enum):
    AWAITING_REQUEST = 'awaiting_request'
    READING_HEADERS = 'reading_headers'
    DISPATCHING = 'dispatching'
    WRITING_RESPONSE = 'writing_response'
    CLOSED = 'closed'


def format_address(address):
    """Format a socket address for log output."""
    if isinstance(address, tuple) and len(address) >= 2:
        return f"{address[0]}:{address[1]}"
    return str(address) or 'local'


class ConnectionSession:
    """
    Keep-alive loop for a single client connection.

    A session owns its connection exclusively. It is created when the
    connection is accepted and finishes in the CLOSED state, with both
    halves of the connection shut down.
    """

    def __init__(self, connection, client_address, listening_address, server_config, request_handler=None):
        """
        Initialize the session.

        Args:
            connection: Connected socket
            client_address: Peer address, used for logging
            listening_address: (host, port) the server is bound to
            server_config: Server configuration object
            request_handler: Shared RequestHandler (created if omitted)
        """
        self.connection = connection
        self.client_address = client_address
        self.listening_address = listening_address
        self.config = server_config
        self.request_handler = request_handler or RequestHandler(server_config)
        self.logger = logging.getLogger('ConnectionSession')

        self.state = SessionState.AWAITING_REQUEST
        self.requests_served = 0
        self.close_reason = None
        self.forced_close = False

    @property
    def peer(self):
        return format_address(self.client_address)

    def run(self):
        """
        Serve requests until the session is closed.

        Returns:
            int: Number of requests answered on this connection
        """
        reader = self.connection.makefile('rb')
        parser = RequestParser(reader, self.config.max_line_length)
        try:
            while self.state is not SessionState.CLOSED:
                self._serve_next(parser)
        finally:
            reader.close()
            self._shutdown()
        return self.requests_served

    def _serve_next(self, parser):
        """Run one iteration of the keep-alive loop."""
        if self.requests_served >= self.config.max_keep_alive_requests:
            self._close(f"request limit of {self.config.max_keep_alive_requests} reached")
            return

        # Idle timeout applies to the wait for the next request line
        self.state = SessionState.AWAITING_REQUEST
        self.connection.settimeout(self.config.keep_alive_timeout)

        try:
            request_line = parser.read_request_line()
        except (socket.timeout, BlockingIOError):
            self._close("idle timeout")
            return
        except ConnectionIOError as e:
            self._close(str(e), forced=True)
            return
        except OSError as e:
            self._close(f"error reading request line: {e}", forced=True)
            return

        if request_line is None:
            self._close("client closed connection")
            return

        self.state = SessionState.READING_HEADERS
        self.connection.settimeout(self.config.request_timeout)

        try:
            headers = parser.read_headers()
        except ConnectionIOError as e:
            self._close(str(e), forced=True)
            return

        self.state = SessionState.DISPATCHING
        try:
            request = make_request(request_line, headers)
        except MalformedRequest as e:
            self.logger.warning(f"{self.peer} - Unsupported or malformed request: {request_line.strip()}")
            status, response = e.status, build_error_response(e.status)
        else:
            status, response = self.request_handler.handle(request, self.listening_address)

        self.state = SessionState.WRITING_RESPONSE
        try:
            self.connection.sendall(response)
        except OSError as e:
            self._close(f"error writing response: {e}", forced=True)
            return

        self.requests_served += 1
        self.logger.info(f"{self.peer} - {request_line.strip()} - {status.code}")

        if wants_close(headers):
            self._close("client requested close")
        else:
            self.state = SessionState.AWAITING_REQUEST

    def _close(self, reason, forced=False):
        self.state = SessionState.CLOSED
        self.close_reason = reason
        self.forced_close = forced
        if forced:
            self.logger.warning(f"{self.peer} - Closing connection: {reason}")
        else:
            self.logger.debug(f"{self.peer} - Closing connection: {reason}")

    def _shutdown(self):
        """Shut down both directions of the connection."""
        try:
            self.connection.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            self.logger.debug(f"{self.peer} - Error shutting down connection: {e}")
