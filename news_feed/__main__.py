"""Main module for news_feed MCP server.

This module allows the server to be run as a Python module using:
python -m news_feed

It delegates to the server application's main function.
"""

import sys

from news_feed.server.app import main

if __name__ == "__main__":
    sys.exit(main())
