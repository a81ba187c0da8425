#!/usr/bin/env python3
"""
Configuration access for the MentorMatch web application.
"""

from functools import lru_cache

from core.config_loader import AppConfig, MatchingConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads config.yaml and applies environment variable overrides once per
    process.

    Returns:
        AppConfig: The application configuration.
    """
    return load_config()


def get_matching_config() -> MatchingConfig:
    """FastAPI dependency returning the matching tunables."""
    return get_config().matching
