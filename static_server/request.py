#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Request Parser Module for the Static File Server
------------------------------------------------
Reads one request (request line and header lines) at a time from a
buffered binary stream.
"""

import socket

from .exceptions import ConnectionIOError, MalformedRequest

SUPPORTED_METHOD = 'GET'
SUPPORTED_VERSION = 'HTTP/1.1'

# Default upper bound for a single request or header line, in bytes
DEFAULT_MAX_LINE_LENGTH = 8192


class Request:
    """
    A parsed HTTP request.

    Header lines are kept as raw strings in the order they were received;
    duplicates are preserved.
    """

    def __init__(self, method, resource, version, headers=None, request_line=''):
        self.method = method
        self.resource = resource
        self.version = version
        self.headers = list(headers or [])
        self.request_line = request_line

    def __repr__(self):
        return f"Request({self.method!r}, {self.resource!r}, {self.version!r})"

    def get_header(self, name):
        """
        Get the value of the first header named `name` (case-insensitive).

        Args:
            name: Header name

        Returns:
            str: Header value with surrounding whitespace removed, or None
        """
        return find_header(self.headers, name)


def find_header(headers, name):
    """
    Find the first header line with the given name.

    Args:
        headers: Raw header lines
        name: Header name (case-insensitive)

    Returns:
        str: Header value, or None if absent
    """
    name = name.lower()
    for line in headers:
        key, sep, value = line.partition(':')
        if sep and key.strip().lower() == name:
            return value.strip()
    return None


def wants_close(headers):
    """
    Check header lines for `Connection: close`.

    Every Connection header counts, not only the first one.

    Args:
        headers: Raw header lines

    Returns:
        bool: True if the connection should close after the response
    """
    for line in headers:
        key, sep, value = line.partition(':')
        if not sep or key.strip().lower() != 'connection':
            continue
        tokens = [token.strip().lower() for token in value.split(',')]
        if 'close' in tokens:
            return True
    return False


def parse_request_line(line):
    """
    Split a request line into its three tokens.

    Only `GET <resource> HTTP/1.1` is accepted.

    Args:
        line: Request line without its line terminator

    Returns:
        tuple: (method, resource, version)

    Raises:
        MalformedRequest: If the line has another shape, method or version
    """
    parts = line.strip().split(' ')
    if len(parts) != 3 or not all(parts):
        raise MalformedRequest(f"Malformed request line: {line!r}", line)

    method, resource, version = parts
    if method != SUPPORTED_METHOD or version != SUPPORTED_VERSION:
        raise MalformedRequest(f"Unsupported request: {line!r}", line)

    return method, resource, version


def decode_line(raw):
    """
    Decode a request or header line.

    UTF-8 is tried first; bytes that are not valid UTF-8 are decoded as
    ISO-8859-1, which never fails.

    Args:
        raw: Line bytes without the terminator

    Returns:
        str: Decoded line
    """
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        return raw.decode('iso-8859-1')


class RequestParser:
    """
    Reads requests off a buffered binary stream such as the file object
    returned by `socket.makefile('rb')`.
    """

    def __init__(self, stream, max_line_length=DEFAULT_MAX_LINE_LENGTH):
        """
        Initialize the parser.

        Args:
            stream: Binary stream supporting readline(limit)
            max_line_length: Longest accepted line, in bytes
        """
        self.stream = stream
        self.max_line_length = max_line_length

    def _read_line(self):
        """
        Read one line and strip its terminator.

        Returns:
            str: Line contents, or None at end of stream
        """
        raw = self.stream.readline(self.max_line_length + 1)
        if not raw:
            return None
        if len(raw) > self.max_line_length:
            raise ConnectionIOError(f"Line exceeds {self.max_line_length} bytes")

        if raw.endswith(b'\r\n'):
            raw = raw[:-2]
        elif raw.endswith(b'\n'):
            raw = raw[:-1]
        return decode_line(raw)

    def read_request_line(self):
        """
        Read the request line.

        Socket errors and timeouts propagate unchanged so the caller can
        tell an idle client from a broken connection.

        Returns:
            str: Request line, or None if the client closed the connection
        """
        return self._read_line()

    def read_headers(self):
        """
        Read header lines up to the blank line or end of stream.

        Returns:
            list: Raw header lines

        Raises:
            ConnectionIOError: If reading fails
        """
        headers = []
        try:
            while True:
                line = self._read_line()
                if not line:
                    break
                headers.append(line)
        except (OSError, socket.timeout) as e:
            raise ConnectionIOError(f"Error reading headers: {e}") from e
        return headers


def make_request(request_line, headers):
    """
    Build a Request from a request line and its header lines.

    Args:
        request_line: Request line without its terminator
        headers: Raw header lines

    Returns:
        Request: Parsed request

    Raises:
        MalformedRequest: If the request line is not supported; the header
            lines are attached to the error
    """
    try:
        method, resource, version = parse_request_line(request_line)
    except MalformedRequest as e:
        e.headers = list(headers)
        raise
    return Request(method, resource, version, headers, request_line)
