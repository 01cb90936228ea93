#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Static File Server Main Module
------------------------------
Accepts TCP connections and hands each one to a ConnectionSession running
on a worker thread.
"""

import socket
import threading
import time
import logging
import signal
from concurrent.futures import ThreadPoolExecutor

from .config import ServerConfig
from .handler import RequestHandler
from .session import ConnectionSession, format_address


class WebServer:
    """
    Web server class that accepts incoming connections and serves each
    one with its own keep-alive session.
    """

    def __init__(self, config=None, config_file=None, **kwargs):
        """
        Initialize the web server.

        Args:
            config: Ready-made ServerConfig (config_file and kwargs are ignored)
            config_file: Path to the configuration file
            **kwargs: Additional configuration parameters that override config file
        """
        self.config = config if config is not None else ServerConfig(config_file, **kwargs)
        self.config.validate()
        self.logger = logging.getLogger('WebServer')

        # Shared by all sessions; holds no per-request state
        self.request_handler = RequestHandler(self.config)

        self.server_socket = None
        self.server_address = None
        self.is_running = False
        self.start_time = None
        self._accept_thread = None

        self.thread_pool = None

        self.active_connections = 0
        self.total_connections = 0
        self.active_connections_lock = threading.Lock()

    def install_signal_handlers(self):
        """Shut down gracefully on SIGINT and SIGTERM (main thread only)."""
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, sig, frame):
        """
        Handle termination signals gracefully.

        Args:
            sig: Signal number
            frame: Current stack frame
        """
        self.logger.info(f"Received signal {sig}, shutting down...")
        self.is_running = False

    def start(self):
        """
        Bind the listening socket and start accepting connections.

        Returns:
            bool: True if the server is running
        """
        if self.is_running:
            self.logger.warning("Server is already running")
            return True

        try:
            self.server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.server_socket.bind((self.config.host, self.config.port))
            self.server_socket.listen(self.config.connection_queue)
            self.server_address = self.server_socket.getsockname()[:2]
        except OSError as e:
            self.logger.error(f"Failed to bind to address {self.config.host}:{self.config.port}: {e}")
            if self.server_socket:
                self.server_socket.close()
                self.server_socket = None
            return False

        self.thread_pool = ThreadPoolExecutor(
            max_workers=self.config.max_threads,
            thread_name_prefix="SessionWorker"
        )
        self.is_running = True
        self.start_time = time.time()

        self.logger.info(f"listening on address: http://{format_address(self.server_address)}")
        self.logger.info(f"Serving files from {self.config.document_root}")
        if not self.config.virtual_hosting:
            self.logger.info("Virtual hosting disabled, serving the document root for every host")

        self._accept_thread = threading.Thread(target=self._accept_connections, daemon=True)
        self._accept_thread.start()
        return True

    def shutdown(self):
        """
        Shut down the web server gracefully.

        Sessions already running finish their current connection.
        """
        if self.server_socket is None:
            return

        self.logger.info("Shutting down server...")
        self.is_running = False

        try:
            self.server_socket.close()
        except OSError as e:
            self.logger.debug(f"Error closing server socket: {e}")
        self.server_socket = None

        if self._accept_thread is not None:
            self._accept_thread.join()
            self._accept_thread = None

        self.logger.debug("Shutting down thread pool...")
        self.thread_pool.shutdown(wait=True)
        self.logger.info("Server shutdown complete")

    def _accept_connections(self):
        """
        Accept incoming connections until the server stops.
        """
        # Periodic wake-up so a stopped server leaves accept()
        self.server_socket.settimeout(0.5)
        server_socket = self.server_socket

        while self.is_running:
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self.is_running:
                    self.logger.error(f"Error accepting connection: {e}")
                    # Sleep a bit to prevent CPU spinning on repeated errors
                    time.sleep(0.1)
                continue

            with self.active_connections_lock:
                self.active_connections += 1
                self.total_connections += 1

            self.thread_pool.submit(self._handle_client, client_socket, client_address)

    def _handle_client(self, client_socket, client_address):
        """
        Serve one client connection to completion.

        Args:
            client_socket: Client socket object
            client_address: Client address tuple (ip, port)
        """
        session = ConnectionSession(
            client_socket,
            client_address,
            self.server_address,
            self.config,
            self.request_handler
        )
        try:
            session.run()
        except Exception as e:
            self.logger.exception(f"Error handling client {format_address(client_address)}: {e}")
        finally:
            client_socket.close()
            with self.active_connections_lock:
                self.active_connections -= 1

    def wait_for_shutdown(self):
        """
        Block until the server stops (signal or KeyboardInterrupt), then
        shut it down.
        """
        try:
            while self.is_running:
                time.sleep(0.5)
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt, shutting down...")
        finally:
            self.shutdown()

    @property
    def stats(self):
        """
        Get server statistics.

        Returns:
            dict: Connection counters and uptime in seconds
        """
        uptime = time.time() - self.start_time if self.start_time else 0
        return {
            'uptime': uptime,
            'active_connections': self.active_connections,
            'total_connections': self.total_connections,
        }
