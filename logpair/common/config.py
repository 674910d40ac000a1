"""
Analyzer Configuration Module

Lets users tune the correlation heuristics, overriding system defaults.
Values come from a JSON file, then from LOGPAIR_* environment variables.
"""

import json
import logging
import os
from typing import List, Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


DEFAULT_IDENTIFIER_FIELDS = [
    "TSCode",
    "TMCode",
    "ShippingOrderCode",
    "OrderCode",
    "Shopid",
    "ShopId",
]


@dataclass
class AnalyzerConfiguration:
    """
    Tunables for parsing and correlation.
    """
    # Strategy B accepts 0 < delta < window
    match_window_seconds: float = 10.0

    tag_max_length: int = 50

    # Field names whose JSON values are used as correlation keys
    identifier_fields: List[str] = field(default_factory=lambda: list(DEFAULT_IDENTIFIER_FIELDS))

    # Bare numeric tokens accepted as NumberMatch keys
    number_min_digits: int = 8
    number_max_digits: int = 15

    success_status: str = "Success"
    success_return_code: str = "API0001"

    page_size: int = 50
    log_level: str = "INFO"


class ConfigLoader:
    """
    Loads configuration from disk and environment.
    """
    DEFAULT_PATH = "logpair_config.json"

    ENV_PATH = "LOGPAIR_CONFIG"
    ENV_MATCH_WINDOW = "LOGPAIR_MATCH_WINDOW_SECONDS"
    ENV_PAGE_SIZE = "LOGPAIR_PAGE_SIZE"
    ENV_LOG_LEVEL = "LOGPAIR_LOG_LEVEL"

    @staticmethod
    def load(path: Optional[str] = None, use_env: bool = True) -> AnalyzerConfiguration:
        if use_env:
            load_dotenv()
            path = path or os.getenv(ConfigLoader.ENV_PATH)
        path = path or ConfigLoader.DEFAULT_PATH

        config = None
        if os.path.exists(path):
            config = ConfigLoader._read_file(path)
        config = config or AnalyzerConfiguration()

        if use_env:
            ConfigLoader._apply_env(config)

        return config

    @staticmethod
    def _read_file(path: str) -> Optional[AnalyzerConfiguration]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("[ConfigLoader] Failed to load config %s: %s", path, e)
            return None

        if not isinstance(data, dict):
            logger.warning("[ConfigLoader] Ignoring %s: top level must be an object", path)
            return None

        defaults = AnalyzerConfiguration()
        try:
            config = AnalyzerConfiguration(
                match_window_seconds=float(data.get("match_window_seconds", defaults.match_window_seconds)),
                tag_max_length=int(data.get("tag_max_length", defaults.tag_max_length)),
                identifier_fields=[str(f) for f in data.get("identifier_fields", defaults.identifier_fields)],
                number_min_digits=int(data.get("number_min_digits", defaults.number_min_digits)),
                number_max_digits=int(data.get("number_max_digits", defaults.number_max_digits)),
                success_status=str(data.get("success_status", defaults.success_status)),
                success_return_code=str(data.get("success_return_code", defaults.success_return_code)),
                page_size=int(data.get("page_size", defaults.page_size)),
                log_level=str(data.get("log_level", defaults.log_level)).upper(),
            )
            ConfigLoader._check_ranges(config)
        except (TypeError, ValueError) as e:
            logger.warning("[ConfigLoader] Invalid value in %s: %s", path, e)
            return None

        logger.info("[ConfigLoader] Loaded analyzer settings from %s", path)
        return config

    @staticmethod
    def _check_ranges(config: AnalyzerConfiguration) -> None:
        # Bounds end up inside regex quantifiers
        if config.tag_max_length < 1:
            raise ValueError(f"tag_max_length must be >= 1, got {config.tag_max_length}")
        if not 1 <= config.number_min_digits <= config.number_max_digits:
            raise ValueError(
                f"number digit range {config.number_min_digits}-{config.number_max_digits} is empty"
            )

    @staticmethod
    def _apply_env(config: AnalyzerConfiguration) -> None:
        window = os.getenv(ConfigLoader.ENV_MATCH_WINDOW)
        if window:
            try:
                config.match_window_seconds = float(window)
            except ValueError:
                logger.warning("[ConfigLoader] Invalid %s=%r, keeping %s",
                               ConfigLoader.ENV_MATCH_WINDOW, window, config.match_window_seconds)

        page_size = os.getenv(ConfigLoader.ENV_PAGE_SIZE)
        if page_size:
            try:
                config.page_size = int(page_size)
            except ValueError:
                logger.warning("[ConfigLoader] Invalid %s=%r, keeping %s",
                               ConfigLoader.ENV_PAGE_SIZE, page_size, config.page_size)

        log_level = os.getenv(ConfigLoader.ENV_LOG_LEVEL)
        if log_level:
            config.log_level = log_level.upper()


# Singleton instance
_config: Optional[AnalyzerConfiguration] = None


def get_config() -> AnalyzerConfiguration:
    """Get or load the process-wide configuration"""
    global _config

    if _config is None:
        _config = ConfigLoader.load()

    return _config
