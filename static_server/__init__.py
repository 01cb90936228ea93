#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Static File HTTP Server
-----------------------
A minimal HTTP/1.1 static file server built on Python's socket library.

Features:
- GET requests for files under a document root
- Virtual hosting: one directory per Host header
- Path traversal and symlink escape protection
- Persistent connections with idle timeout and request limits
"""

__version__ = '1.0.0'

from .config import ServerConfig
from .handler import RequestHandler
from .server import WebServer
from .session import ConnectionSession, SessionState

__all__ = ['WebServer', 'ServerConfig', 'RequestHandler', 'ConnectionSession', 'SessionState']
