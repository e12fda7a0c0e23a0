"""Centralized constants for the nightly pruner."""

# Release
NIGHTLY_TAG = "nightly"
KEEP_ASSETS = 3

# GitHub API
GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
ASSETS_PER_PAGE = 100

# HTTP timeout (seconds)
REQUEST_TIMEOUT = 30.0
