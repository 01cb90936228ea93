#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-Line Interface for the Static File Server
-------------------------------------------------
Usage: static-server [port] [directory] [options]
"""

import sys
import argparse
import logging

from . import __version__
from .config import ServerConfig
from .exceptions import ConfigError
from .server import WebServer
from .utils import setup_logging


def build_parser():
    """
    Build the argument parser.

    Returns:
        argparse.ArgumentParser: Parser for the server options
    """
    parser = argparse.ArgumentParser(
        prog='static-server',
        description='Static file HTTP/1.1 server with virtual hosting'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    # Positional form: static-server [port] [directory]
    parser.add_argument('port_arg', nargs='?', type=int, metavar='port', help='Port to listen on')
    parser.add_argument('directory_arg', nargs='?', metavar='directory', help='Document root directory')

    # Basic server options
    parser.add_argument('-H', '--host', type=str, help='Host address to bind to')
    parser.add_argument('-p', '--port', type=int, help='Port to listen on')
    parser.add_argument('-d', '--document-root', type=str, help='Document root directory')
    parser.add_argument('-c', '--config', type=str, help='Path to configuration file')

    # Logging options
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level')
    parser.add_argument('--log-file', type=str, help='Path to log file')
    parser.add_argument('--no-color', action='store_true', help='Disable colored logging')

    # Server behavior options
    parser.add_argument('--no-virtual-hosts', action='store_true',
                        help='Serve the document root directly instead of one directory per Host')
    parser.add_argument('--max-threads', type=int, help='Maximum number of concurrent connections')
    parser.add_argument('--keep-alive-timeout', type=float, help='Idle seconds before a connection is closed')
    parser.add_argument('--max-keep-alive-requests', type=int, help='Maximum requests per connection')
    parser.add_argument('--request-timeout', type=float, help='Seconds allowed for reading headers and writing a response')
    parser.add_argument('--connection-queue', type=int, help='Connection queue size')

    return parser


def build_config(args, environ=None):
    """
    Build the server configuration from parsed arguments.

    Precedence: command line > environment > configuration file > defaults.

    Args:
        args: argparse.Namespace
        environ: Environment mapping (default: os.environ)

    Returns:
        ServerConfig: Configuration instance
    """
    config = ServerConfig(args.config)
    config.load_from_env(environ)

    overrides = {
        'host': args.host,
        'port': args.port if args.port is not None else args.port_arg,
        'document_root': args.document_root or args.directory_arg,
        'log_level': args.log_level,
        'log_file': args.log_file,
        'max_threads': args.max_threads,
        'keep_alive_timeout': args.keep_alive_timeout,
        'max_keep_alive_requests': args.max_keep_alive_requests,
        'request_timeout': args.request_timeout,
        'connection_queue': args.connection_queue,
    }
    for key, value in overrides.items():
        if value is not None:
            config.set(key, value)

    if args.no_color:
        config.set('colored_logging', False)
    if args.no_virtual_hosts:
        config.set('virtual_hosting', False)

    return config


def main(argv=None):
    """
    Main entry point for the server.

    Returns:
        int: Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = build_config(args)

    setup_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        max_size=config.log_max_size,
        backup_count=config.log_backup_count,
        use_colored_logging=config.colored_logging
    )
    logger = logging.getLogger('static_server')

    try:
        server = WebServer(config=config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        parser.print_usage(sys.stderr)
        return 1

    if not server.start():
        return 1

    server.install_signal_handlers()
    server.wait_for_shutdown()
    return 0
