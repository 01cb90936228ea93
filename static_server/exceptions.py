#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Exceptions Module for the Static File Server
--------------------------------------------
Error taxonomy shared by the request parser, the path resolver and the
content dispatcher.

HTTP-level errors carry the status they are answered with. Transport-level
errors (ConnectionIOError) are never answered; they close the connection.
"""

from .status import BadRequest, Forbidden, NotFound, NotImplementedStatus, ServerError


class StaticServerError(Exception):
    """Base class for all server errors."""


class HttpError(StaticServerError):
    """
    An error that is recovered into a well-formed HTTP response.

    Subclasses set `status` to the Status variant sent back to the client.
    """

    status = ServerError()


class MalformedRequest(HttpError):
    """
    The request line is not exactly `GET <resource> HTTP/1.1`.

    Carries the header lines read after the request line so the session can
    still honor `Connection: close`.
    """

    status = NotImplementedStatus()

    def __init__(self, message, request_line='', headers=None):
        super().__init__(message)
        self.request_line = request_line
        self.headers = list(headers or [])


class MissingHost(HttpError):
    """No usable Host header while virtual hosting is enabled."""

    status = BadRequest()


class PathTraversal(HttpError):
    """The requested resource escapes the document root."""

    status = Forbidden()


class UnknownResourceType(HttpError):
    """The requested resource has no file extension."""

    status = NotFound()


class ResourceNotFound(HttpError):
    """The target file does not exist."""

    status = NotFound()


class ResourceIOError(HttpError):
    """Reading the target file failed."""

    status = ServerError()


class ConnectionIOError(StaticServerError):
    """Reading from or writing to the client connection failed."""


class ConfigError(StaticServerError):
    """Invalid server configuration."""
