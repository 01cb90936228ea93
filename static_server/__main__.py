#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Module Entry Point for the Static File Server
---------------------------------------------
Enables `python -m static_server` invocation.
"""

import sys

from static_server.cli import main

if __name__ == "__main__":
    sys.exit(main())
