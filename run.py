#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Static File HTTP Server
-----------------------
Main entry point when running from a source checkout.

    python run.py 8080 ./htdocs
"""

import sys

from static_server.cli import main


if __name__ == '__main__':
    sys.exit(main())
