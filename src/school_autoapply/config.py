"""
Configuration Management for the auto-apply engine.

This module provides a configuration system with default settings and
environment variable overrides via .env file support.

Usage:
    from school_autoapply.config import config

    manager = BrowserManager(BrowserManagerOptions(headless=config.PLAYWRIGHT_HEADLESS))
"""

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv


class Config:
    """
    Base configuration class with default settings for automation runs.

    All configuration values can be overridden via environment variables
    or .env file.
    """

    def __init__(self):
        """Initialize configuration, loading .env file if it exists."""
        # Project root is the parent of the src directory
        env_path = Path(__file__).resolve().parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        self._load_config()

    def _load_config(self):
        """Load all configuration values with environment overrides."""
        # ================================
        # BROWSER SETTINGS
        # ================================
        self.PLAYWRIGHT_HEADLESS = self._get_headless_env(True)
        self.BROWSER_SLOW_MO_MS = self._get_int_env("BROWSER_SLOW_MO_MS", 0)
        self.BROWSER_LOCALE = self._get_env("BROWSER_LOCALE", "en-US")
        self.BROWSER_TIMEZONE = self._get_env("BROWSER_TIMEZONE", "UTC")
        self.BROWSER_USER_AGENT = self._get_env("BROWSER_USER_AGENT", "")
        self.VIEWPORT_WIDTH = self._get_int_env("VIEWPORT_WIDTH", 1366)
        self.VIEWPORT_HEIGHT = self._get_int_env("VIEWPORT_HEIGHT", 768)

        # ================================
        # TIMEOUTS (milliseconds, Playwright convention)
        # ================================
        self.NAVIGATION_TIMEOUT_MS = self._get_int_env("NAVIGATION_TIMEOUT_MS", 45_000)
        self.NETWORK_IDLE_TIMEOUT_MS = self._get_int_env("NETWORK_IDLE_TIMEOUT_MS", 15_000)
        self.LOGIN_SUBMIT_TIMEOUT_MS = self._get_int_env("LOGIN_SUBMIT_TIMEOUT_MS", 30_000)
        self.LOGIN_IDLE_TIMEOUT_MS = self._get_int_env("LOGIN_IDLE_TIMEOUT_MS", 30_000)
        self.SUBMIT_TIMEOUT_MS = self._get_int_env("SUBMIT_TIMEOUT_MS", 30_000)

        # ================================
        # FORM FILLING
        # ================================
        self.TYPING_DELAY_MS = self._get_int_env("TYPING_DELAY_MS", 0)
        self.PAGE_PREVIEW_CHARS = self._get_int_env("PAGE_PREVIEW_CHARS", 5000)
        self.PAGE_TEXT_CHARS = self._get_int_env("PAGE_TEXT_CHARS", 20_000)

        # ================================
        # SEMANTIC FIELD MAPPER
        # ================================
        self.ENABLE_SEMANTIC_MAPPER = self._get_bool_env("ENABLE_SEMANTIC_MAPPER", False)
        self.SEMANTIC_MODEL_NAME = self._get_env("SEMANTIC_MODEL_NAME", "all-MiniLM-L6-v2")
        self.SEMANTIC_MIN_SCORE = self._get_float_env("SEMANTIC_MIN_SCORE", 0.55)

        # ================================
        # ARTIFACTS AND LOGGING
        # ================================
        self.AUTO_APPLY_SCREENSHOTS = self._get_env("AUTO_APPLY_SCREENSHOTS", "tmp/auto-apply")
        self.LOG_LEVEL = self._get_env("LOG_LEVEL", "INFO")

    def _get_env(self, key: str, default: str) -> str:
        """Get string environment variable with default."""
        return os.getenv(key, default)

    def _get_int_env(self, key: str, default: int) -> int:
        """Get integer environment variable with default."""
        try:
            return int(os.getenv(key, str(default)))
        except (ValueError, TypeError):
            return default

    def _get_float_env(self, key: str, default: float) -> float:
        """Get float environment variable with default."""
        try:
            return float(os.getenv(key, str(default)))
        except (ValueError, TypeError):
            return default

    def _get_bool_env(self, key: str, default: bool) -> bool:
        """Get boolean environment variable with default."""
        value = os.getenv(key, str(default)).lower()
        return value in ("true", "1", "yes", "on", "enabled")

    def _get_headless_env(self, default: bool) -> bool:
        """Headless unless PLAYWRIGHT_HEADLESS is "false"; any other value keeps it on."""
        value = os.getenv("PLAYWRIGHT_HEADLESS")
        if value is None:
            return default
        return value.strip().lower() != "false"

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dict for logging/debugging."""
        return {key: value for key, value in self.__dict__.items() if not key.startswith("_")}


class DevelopmentConfig(Config):
    """Development environment configuration: headed browser and debug logs."""

    def _load_config(self):
        """Load base config then apply development overrides."""
        super()._load_config()

        self.PLAYWRIGHT_HEADLESS = self._get_headless_env(False)
        self.LOG_LEVEL = self._get_env("LOG_LEVEL", "DEBUG")
        self.BROWSER_SLOW_MO_MS = self._get_int_env("BROWSER_SLOW_MO_MS", 50)


class ProductionConfig(Config):
    """Production environment configuration."""

    def _load_config(self):
        """Load base config then apply production overrides."""
        super()._load_config()

        self.PLAYWRIGHT_HEADLESS = self._get_headless_env(True)
        self.LOG_LEVEL = self._get_env("LOG_LEVEL", "INFO")


# ================================
# CONFIGURATION FACTORY
# ================================


def get_config() -> Config:
    """Get appropriate configuration based on environment.

    Returns:
        Configuration instance based on AUTO_APPLY_ENV environment variable
    """
    env = os.getenv("AUTO_APPLY_ENV", "default")

    if env == "development":
        return DevelopmentConfig()
    elif env == "production":
        return ProductionConfig()
    else:
        return Config()


# Global configuration instance
config = get_config()
