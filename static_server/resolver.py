#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Path Resolver Module for the Static File Server
-----------------------------------------------
Turns a request target into an absolute path under the document root:
- Host header parsing for virtual hosting
- Lexical walk of the request path with traversal checks
- Optional symlink confinement of the final target
"""

import os
import re
import logging
import urllib.parse
from collections import namedtuple

from .exceptions import PathTraversal

logger = logging.getLogger('PathResolver')

# Separators a client could use to split a path segment on this platform
_SEPARATOR_RE = re.compile('[' + re.escape(''.join({'/', os.sep, os.altsep or '/'})) + ']')

_SCHEME_PREFIXES = ('http://', 'https://')

# root: the confinement boundary (document root, plus host segment)
# path: the candidate file system path
ResolvedPath = namedtuple('ResolvedPath', ['root', 'path'])


def _strip_scheme(value):
    value = value.strip()
    for prefix in _SCHEME_PREFIXES:
        if value.lower().startswith(prefix):
            return value[len(prefix):]
    return value


def _split_host_port(value):
    """Split a Host header value into (name, port-or-None)."""
    authority = _strip_scheme(value).split('/', 1)[0]

    # Bracketed IPv6 literal, e.g. [::1]:8080
    if authority.startswith('['):
        end = authority.find(']')
        if end == -1:
            return '', None
        name, rest = authority[:end + 1], authority[end + 1:]
        port = rest[1:] if rest.startswith(':') else None
        return name, port

    name, sep, port = authority.partition(':')
    return name, (port if sep else None)


def is_usable_host(name):
    """
    Check that a host name can be used as a single directory segment.

    Args:
        name: Host name without scheme or port

    Returns:
        bool: True if the name is usable
    """
    if not name or name in ('.', '..'):
        return False
    if _SEPARATOR_RE.search(name) or '\\' in name or '\x00' in name:
        return False
    return not any(ch.isspace() for ch in name)


def parse_host_address(value):
    """
    Extract the host name from a Host header value.

    Accepts `[http://]name[:port][/...]`.

    Args:
        value: Host header value (without the `Host:` key)

    Returns:
        str: Host name, or None if no usable name is present
    """
    if value is None:
        return None
    name, _ = _split_host_port(value)
    return name if is_usable_host(name) else None


def parse_host_port(value):
    """
    Extract the port from a Host header value.

    Args:
        value: Host header value

    Returns:
        str: Port digits, or None if absent or not numeric
    """
    if value is None:
        return None
    _, port = _split_host_port(value)
    if port and port.isdigit():
        return port
    return None


def target_path(resource):
    """Drop the query string and fragment from a request target."""
    return resource.split('?', 1)[0].split('#', 1)[0]


def canonicalize_base(base_dir):
    """
    Resolve symlinks in the document root and make it absolute.

    Args:
        base_dir: Document root

    Returns:
        str: Canonical document root

    Raises:
        PathTraversal: If the document root cannot be canonicalized
    """
    try:
        return os.path.realpath(base_dir, strict=True)
    except (OSError, ValueError) as e:
        logger.error(f"Error canonicalizing base directory '{base_dir}': {e}")
        raise PathTraversal(f"Cannot canonicalize base directory {base_dir}") from e


def is_within(base, path):
    """
    Check that `path` is `base` or one of its descendants.

    Compares whole path components, so /srv/www2 is not inside /srv/www.
    """
    try:
        return os.path.commonpath([base, path]) == base
    except ValueError:
        # Different drives, or mixed absolute and relative paths
        return False


def resolve_path(base_dir, host, resource, virtual_hosting=True):
    """
    Resolve a request target to a path confined to the document root.

    The walk is lexical: `..` pops one segment and containment is checked
    after every pop. No file system access happens beyond canonicalizing
    the document root.

    Args:
        base_dir: Document root
        host: Host name (used only when virtual hosting is enabled)
        resource: Request target as sent by the client
        virtual_hosting: Insert the host name as a directory segment

    Returns:
        ResolvedPath: Confinement root and candidate path

    Raises:
        PathTraversal: If the target escapes the document root
    """
    root = canonicalize_base(base_dir)
    if virtual_hosting:
        if not is_usable_host(host):
            raise PathTraversal(f"Unusable host segment {host!r}")
        root = os.path.join(root, host)

    path = urllib.parse.unquote(target_path(resource))
    if path.startswith('/'):
        path = path[1:]

    if os.path.isabs(path) or path.startswith('/'):
        logger.warning(f"Absolute path in request target: {resource}")
        raise PathTraversal(f"Absolute path {resource!r}")

    accumulated = root
    for segment in _SEPARATOR_RE.split(path):
        if segment in ('', '.'):
            continue

        if segment == '..':
            parent = os.path.dirname(accumulated)
            if parent == accumulated or not is_within(root, parent):
                logger.warning(f"Illegal path detected: {resource}")
                raise PathTraversal(f"Path escapes document root: {resource!r}")
            accumulated = parent
            continue

        if '\x00' in segment or os.path.splitdrive(segment)[0]:
            logger.warning(f"Illegal path segment {segment!r} in {resource}")
            raise PathTraversal(f"Illegal path segment {segment!r}")

        accumulated = os.path.join(accumulated, segment)

    if not is_within(root, accumulated):
        logger.warning(f"Illegal path detected: {resource}")
        raise PathTraversal(f"Path escapes document root: {resource!r}")

    return ResolvedPath(root, accumulated)


def confine_real_path(resolved):
    """
    Re-check containment after following symlinks.

    A symlink inside the document tree may point outside of it; the lexical
    walk in resolve_path cannot see that.

    Args:
        resolved: ResolvedPath returned by resolve_path

    Returns:
        str: Canonical target path

    Raises:
        PathTraversal: If the canonical target lies outside the root
    """
    real_root = os.path.realpath(resolved.root)
    real_path = os.path.realpath(resolved.path)
    if not is_within(real_root, real_path):
        logger.warning(f"Symlink escape detected: {resolved.path} -> {real_path}")
        raise PathTraversal(f"Symlink escapes document root: {resolved.path}")
    return real_path
