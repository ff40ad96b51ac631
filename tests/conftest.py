"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests, so
the environment below is in place before app settings are created.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("SEARCH_PROVIDER", "scryfall")
os.environ.setdefault("SEARCH_BASE_URL", "https://api.scryfall.test")
os.environ.setdefault("SEARCH_USER_AGENT", "CardSearchPagerTests/0.1")
os.environ.setdefault("SEARCH_MIN_INTERVAL_MS", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")
