#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
HTTP Request Handler Module for the Static File Server
------------------------------------------------------
Maps a parsed GET request to a file under the document root and builds
the response: directory redirects, file reads by extension, and error
pages for every HTTP-level failure.
"""

import os
import logging

from .exceptions import (
    HttpError,
    MissingHost,
    ResourceIOError,
    ResourceNotFound,
    UnknownResourceType,
)
from .resolver import (
    ResolvedPath,
    confine_real_path,
    parse_host_address,
    parse_host_port,
    resolve_path,
    target_path,
)
from .response import HTML_CONTENT_TYPE, build_error_response, build_response
from .status import Redirect, Success
from .utils import file_extension, get_mime_type

INDEX_FILE = 'index.html'


class RequestHandler:
    """
    Turns requests into responses.

    Holds no per-request state, so one instance can be shared by every
    connection session.
    """

    def __init__(self, server_config):
        """
        Initialize the request handler.

        Args:
            server_config: Server configuration object
        """
        self.config = server_config
        self.logger = logging.getLogger('RequestHandler')

    def handle(self, request, listening_address):
        """
        Build the response for a request.

        HTTP-level errors are turned into error responses here; nothing
        but programming errors escapes.

        Args:
            request: Parsed Request
            listening_address: (host, port) the server is bound to

        Returns:
            tuple: (status, response bytes)
        """
        try:
            return self._handle_get(request, listening_address)
        except HttpError as e:
            self.logger.debug(f"{request.resource}: {e}")
            return e.status, build_error_response(e.status)

    def _handle_get(self, request, listening_address):
        host_value = request.get_header('Host')
        host = parse_host_address(host_value)

        if self.config.virtual_hosting and host is None:
            self.logger.warning(f"Missing or unusable Host header for {request.resource}")
            raise MissingHost(f"No usable Host header: {host_value!r}")

        resolved = resolve_path(
            self.config.document_root,
            host,
            request.resource,
            self.config.virtual_hosting
        )
        self._confine(resolved)

        if os.path.isdir(resolved.path):
            path = target_path(request.resource)
            if path.endswith('/') and not self.config.always_redirect_directories:
                resolved = ResolvedPath(resolved.root, os.path.join(resolved.path, INDEX_FILE))
                self._confine(resolved)
            else:
                return self._redirect_to_index(path, host_value, host, listening_address)

        return self._serve_file(resolved.path)

    def _confine(self, resolved):
        if self.config.enforce_symlink_confinement:
            confine_real_path(resolved)

    def _redirect_to_index(self, path, host_value, host, listening_address):
        """
        Redirect a directory request to its index page.

        Args:
            path: Request path without query string
            host_value: Raw Host header value
            host: Host name parsed from the header, or None
            listening_address: (host, port) the server is bound to

        Returns:
            tuple: (status, response bytes)
        """
        name = host or listening_address[0]
        port = parse_host_port(host_value) or listening_address[1]

        if not path.startswith('/'):
            path = '/' + path
        if not path.endswith('/'):
            path += '/'

        redirect_url = f"http://{name}:{port}{path}{INDEX_FILE}"
        self.logger.debug(f"Redirecting to: {redirect_url}")

        status = Redirect(redirect_url)
        return status, build_response(status, HTML_CONTENT_TYPE, b'')

    def _serve_file(self, file_path):
        ext = file_extension(file_path)
        if ext is None:
            self.logger.info(f"Unhandled path or file extension: {file_path}")
            raise UnknownResourceType(f"No file extension: {file_path}")

        content = self._read_file(file_path)

        if ext.lower() == 'html':
            try:
                text = content.decode('utf-8')
            except UnicodeDecodeError as e:
                self.logger.error(f"Error reading file {file_path}: {e}")
                raise ResourceIOError(f"Invalid UTF-8 in {file_path}") from e
            return Success(), build_response(Success(), HTML_CONTENT_TYPE, text)

        return Success(), build_response(Success(), get_mime_type(ext), content)

    def _read_file(self, file_path):
        """
        Read a whole file.

        Args:
            file_path: Path to the file

        Returns:
            bytes: File content

        Raises:
            ResourceNotFound: If the file is missing and missing files map to 404
            ResourceIOError: On any other read failure
        """
        try:
            with open(file_path, 'rb') as f:
                return f.read()
        except OSError as e:
            missing = isinstance(e, (FileNotFoundError, NotADirectoryError))
            if missing and self.config.not_found_for_missing_files:
                self.logger.info(f"File not found: {file_path}")
                raise ResourceNotFound(f"No such file: {file_path}") from e
            self.logger.error(f"Error reading file {file_path}: {e}")
            raise ResourceIOError(f"Cannot read {file_path}") from e
