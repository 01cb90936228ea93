#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Configuration Module for the Static File Server
-----------------------------------------------
Handles loading and managing server configuration from various sources:
- Default configuration
- Configuration file (JSON)
- Environment variables
- Keyword overrides (usually from the command line)
"""

import os
import json
import logging

from .exceptions import ConfigError

# Setting this to 1 serves the document root directly, without a
# per-host directory segment
HOST_NOT_DEFINED_ENV = 'HOST_NOT_DEFINED'


class ServerConfig:
    """
    Server configuration manager.

    Loads and provides access to server configuration settings from various
    sources, with the following precedence (highest to lowest):
    1. Keyword arguments
    2. Environment variables (when read with load_from_env)
    3. Configuration file
    4. Default values
    """

    DEFAULT_CONFIG = {
        "host": "127.0.0.1",
        "port": 8000,
        "document_root": "htdocs",
        "virtual_hosting": True,
        "keep_alive_timeout": 5,
        "max_keep_alive_requests": 100,
        "request_timeout": 30,
        "max_line_length": 8192,
        "always_redirect_directories": True,
        "not_found_for_missing_files": False,
        "enforce_symlink_confinement": True,
        "max_threads": 20,
        "connection_queue": 10,
        "log_level": "INFO",
        "log_file": None,
        "log_max_size": 10485760,  # 10 MB
        "log_backup_count": 5,
        "colored_logging": True,
    }

    def __init__(self, config_file=None, **kwargs):
        """
        Initialize the configuration with values from file and kwargs.

        Args:
            config_file: Path to the configuration file
            **kwargs: Additional configuration parameters that override file values
        """
        self._config = self.DEFAULT_CONFIG.copy()
        self.logger = logging.getLogger('ServerConfig')

        if config_file:
            self.load_from_file(config_file)

        for key, value in kwargs.items():
            self._config[key] = value

    def load_from_file(self, config_path="config.json"):
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file (default: config.json)

        Returns:
            bool: True if loaded successfully, False otherwise
        """
        if not os.path.exists(config_path):
            self.logger.warning(f"Configuration file {config_path} not found. Using defaults.")
            return False

        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Error loading configuration: {e}")
            return False

        if not isinstance(file_config, dict):
            self.logger.error(f"Configuration file {config_path} must contain a JSON object")
            return False

        self._config.update(file_config)
        self.logger.info(f"Loaded configuration from {config_path}")
        return True

    def load_from_env(self, environ=None):
        """
        Apply settings from environment variables.

        The environment is read once here; the rest of the server only sees
        the resulting configuration values.

        Args:
            environ: Mapping to read (default: os.environ)
        """
        environ = os.environ if environ is None else environ
        if environ.get(HOST_NOT_DEFINED_ENV, '') == '1':
            self.logger.info(f"{HOST_NOT_DEFINED_ENV}=1, virtual hosting disabled")
            self._config['virtual_hosting'] = False

    def validate(self):
        """
        Check that the configuration is usable.

        Raises:
            ConfigError: If a value is out of range
        """
        port = self.port
        if not isinstance(port, int) or not 0 <= port <= 65535:
            raise ConfigError(f"Invalid port: {port!r}")

        for key in ('keep_alive_timeout', 'request_timeout'):
            value = self.get(key)
            if not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"{key} must be a positive number, got {value!r}")

        for key in ('max_keep_alive_requests', 'max_line_length', 'max_threads', 'connection_queue'):
            value = self.get(key)
            if not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{key} must be a positive integer, got {value!r}")

        if not self.document_root:
            raise ConfigError("document_root is not set")

    def get(self, key, default=None):
        """
        Get a configuration value.

        Args:
            key: Configuration key
            default: Default value if key is not found

        Returns:
            Value for the key or default if not found
        """
        return self._config.get(key, default)

    def set(self, key, value):
        """
        Set a configuration value.

        Args:
            key: Configuration key
            value: Value to set
        """
        self._config[key] = value

    def get_all(self):
        """
        Get all configuration values.

        Returns:
            dict: All configuration values
        """
        return self._config.copy()

    # Property accessors for common configuration values
    @property
    def host(self):
        return self.get('host')

    @property
    def port(self):
        return self.get('port')

    @property
    def document_root(self):
        return self.get('document_root')

    @property
    def virtual_hosting(self):
        return bool(self.get('virtual_hosting', True))

    @property
    def keep_alive_timeout(self):
        return self.get('keep_alive_timeout', 5)

    @property
    def max_keep_alive_requests(self):
        return self.get('max_keep_alive_requests', 100)

    @property
    def request_timeout(self):
        return self.get('request_timeout', 30)

    @property
    def max_line_length(self):
        return self.get('max_line_length', 8192)

    @property
    def always_redirect_directories(self):
        return bool(self.get('always_redirect_directories', True))

    @property
    def not_found_for_missing_files(self):
        return bool(self.get('not_found_for_missing_files', False))

    @property
    def enforce_symlink_confinement(self):
        return bool(self.get('enforce_symlink_confinement', True))

    @property
    def max_threads(self):
        return self.get('max_threads')

    @property
    def connection_queue(self):
        return self.get('connection_queue')

    @property
    def log_level(self):
        return self.get('log_level')

    @property
    def log_file(self):
        return self.get('log_file')

    @property
    def log_max_size(self):
        return self.get('log_max_size')

    @property
    def log_backup_count(self):
        return self.get('log_backup_count')

    @property
    def colored_logging(self):
        return self.get('colored_logging')
