#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Response Builder Module for the Static File Server
--------------------------------------------------
Assembles complete HTTP/1.1 responses as a single byte string:
status line, headers, blank line, body.
"""

import html

from .status import Redirect, from_status

HTML_CONTENT_TYPE = 'text/html; charset=utf-8'

# Page sent with a redirect when the caller supplies no body
REDIRECT_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{status}</title></head>
<body>
<h1>{status}</h1>
<p>The document has moved <a href="{target}">here</a>.</p>
</body>
</html>"""

# Page sent with an error status when the caller supplies no body
ERROR_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{status}</title></head>
<body>
<h1>{status}</h1>
</body>
</html>"""


def _sanitize_header_value(value):
    """Strip CR / LF to prevent header injection."""
    return str(value).replace('\r', '').replace('\n', '')


def synthesize_body(status):
    """
    Build the default HTML body for a status.

    Args:
        status: Status instance

    Returns:
        bytes: Synthesized page, or b'' for statuses without a default page
    """
    _, reason = from_status(status)
    if isinstance(status, Redirect):
        page = REDIRECT_PAGE_TEMPLATE.format(
            status=reason,
            target=html.escape(status.target, quote=True)
        )
    elif status.is_error:
        page = ERROR_PAGE_TEMPLATE.format(status=reason)
    else:
        return b''
    return page.encode('utf-8')


def build_response(status, content_type, body=b''):
    """
    Build an HTTP/1.1 response.

    The Content-Length header always matches the body that is actually
    sent, including a synthesized redirect or error page.

    Args:
        status: Status instance
        content_type: MIME type for the Content-Type header
        body: Response body (bytes or str)

    Returns:
        bytes: Complete response
    """
    code, reason = from_status(status)

    if isinstance(body, str):
        body = body.encode('utf-8')
    body = bytes(body)

    if not body:
        body = synthesize_body(status)

    headers = []
    if isinstance(status, Redirect):
        headers.append(('Location', status.target))
    headers.append(('Content-Type', content_type))
    headers.append(('Content-Length', len(body)))

    head = f"HTTP/1.1 {code} {reason}\r\n"
    head += "".join(f"{name}: {_sanitize_header_value(value)}\r\n" for name, value in headers)
    head += "\r\n"

    return head.encode('utf-8') + body


def build_error_response(status):
    """
    Build a response whose body is the default page for `status`.

    Args:
        status: Status instance

    Returns:
        bytes: Complete response
    """
    return build_response(status, HTML_CONTENT_TYPE, b'')
