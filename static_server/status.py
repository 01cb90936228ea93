#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Status Module for the Static File Server
----------------------------------------
Abstract request outcomes and their HTTP status codes.

Each outcome is its own class. Only Redirect carries a payload, the target
URL used for the Location header and for the synthesized redirect page.
"""


class Status:
    """
    Base class for request outcomes.

    Subclasses define `code` and `reason`. Two statuses are equal when they
    are the same variant (and, for Redirect, point at the same target).
    """

    code = None
    reason = None
    is_error = False

    def _key(self):
        return (type(self),)

    def __eq__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"{type(self).__name__}()"


class Success(Status):
    code = 200
    reason = 'OK'


class Redirect(Status):
    code = 301
    reason = 'Moved Permanently'

    def __init__(self, target):
        self.target = target

    def _key(self):
        return (type(self), self.target)

    def __repr__(self):
        return f"Redirect({self.target!r})"


class BadRequest(Status):
    code = 400
    reason = 'Bad Request'
    is_error = True


class Forbidden(Status):
    code = 403
    reason = 'Forbidden'
    is_error = True


class NotFound(Status):
    code = 404
    reason = 'Not Found'
    is_error = True


class ServerError(Status):
    code = 500
    reason = 'Internal Server Error'
    is_error = True


class NotImplementedStatus(Status):
    code = 501
    reason = 'Not Implemented'
    is_error = True


def from_status(status):
    """
    Map a status to its numeric code and reason phrase.

    Args:
        status: Status instance

    Returns:
        tuple: (code, reason)
    """
    return status.code, status.reason
