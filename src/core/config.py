"""Runtime configuration model for the catalog builder.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    CONTACT_INFO_FILE_NAME,
    DEFAULT_BASE_DIR,
    DEFAULT_FEED_TIMEOUT_SECONDS,
    DEFAULT_TIME_MODE_FEED_URL,
    DEFAULT_TP_FEED_URL,
    DESCRIPTOR_DIR_NAME,
    ICON_DIR_NAME,
    SITE_CONFIG_FILE_NAME,
)
from core.errors import CatalogConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class CatalogConfig:
    """Validated runtime configuration.

    Attributes:
        base_dir: Site root holding descriptors, icons, and documents.
        site_config_path: YAML file with display and filter definitions.
        tp_feed_url: Twitch-Plays score feed URL.
        time_mode_feed_url: Combined Time-Mode score feed URL.
        feed_timeout_seconds: Network timeout for each feed request.
        max_workers: Degree of parallelism for descriptor loading.
        consistency_check: Re-serialize descriptors and report drift.
    """

    base_dir: Path
    site_config_path: Path
    tp_feed_url: str
    time_mode_feed_url: str
    feed_timeout_seconds: float
    max_workers: int
    consistency_check: bool

    @classmethod
    def from_env(cls) -> "CatalogConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            CatalogConfigError: If environment values are invalid.
        """
        base_dir = Path(os.getenv("CATALOG_BASE_DIR", str(DEFAULT_BASE_DIR))).expanduser().resolve()
        site_config_value = os.getenv("CATALOG_SITE_CONFIG")
        site_config_path = (
            Path(site_config_value).expanduser().resolve()
            if site_config_value
            else base_dir / SITE_CONFIG_FILE_NAME
        )
        return cls(
            base_dir=base_dir,
            site_config_path=site_config_path,
            tp_feed_url=os.getenv("CATALOG_TP_FEED_URL", DEFAULT_TP_FEED_URL),
            time_mode_feed_url=os.getenv("CATALOG_TIME_MODE_FEED_URL", DEFAULT_TIME_MODE_FEED_URL),
            feed_timeout_seconds=_parse_timeout(
                os.getenv("CATALOG_FEED_TIMEOUT", str(DEFAULT_FEED_TIMEOUT_SECONDS))
            ),
            max_workers=_parse_workers(os.getenv("CATALOG_WORKERS")),
            consistency_check=_parse_flag(
                "CATALOG_CONSISTENCY_CHECK", os.getenv("CATALOG_CONSISTENCY_CHECK", "")
            ),
        )

    @property
    def descriptor_dir(self) -> Path:
        """Directory holding one JSON descriptor per module."""
        return self.base_dir / DESCRIPTOR_DIR_NAME

    @property
    def icon_dir(self) -> Path:
        """Directory holding one PNG icon per module."""
        return self.base_dir / ICON_DIR_NAME

    @property
    def contact_info_path(self) -> Path:
        """JSON file with contact details embedded in the bootstrap script."""
        return self.base_dir / CONTACT_INFO_FILE_NAME


def _parse_timeout(raw_value: str) -> float:
    """Parse the feed timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive timeout in seconds.

    Raises:
        CatalogConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise CatalogConfigError(
            "Invalid CATALOG_FEED_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set CATALOG_FEED_TIMEOUT to a positive number."
        ) from error
    if timeout <= 0:
        raise CatalogConfigError(
            f"Invalid CATALOG_FEED_TIMEOUT value: expected positive number, got '{raw_value}'."
        )
    return timeout


def _parse_workers(raw_value: str | None) -> int:
    """Parse the worker count, defaulting to available processing units.

    Args:
        raw_value: Raw string from environment or None.

    Returns:
        Worker count of at least one.

    Raises:
        CatalogConfigError: If value is not a positive integer.
    """
    if not raw_value:
        return os.cpu_count() or 1
    try:
        workers = int(raw_value)
    except ValueError as error:
        raise CatalogConfigError(
            "Invalid CATALOG_WORKERS value: "
            f"expected integer, got '{raw_value}'. "
            "Set CATALOG_WORKERS to a positive integer or leave it unset."
        ) from error
    if workers < 1:
        raise CatalogConfigError(
            f"Invalid CATALOG_WORKERS value: expected at least 1, got '{raw_value}'."
        )
    return workers


def _parse_flag(variable: str, raw_value: str) -> bool:
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise CatalogConfigError(
        f"Invalid {variable} value: expected one of {_TRUE_VALUES + _FALSE_VALUES[:-1]}, "
        f"got '{raw_value}'."
    )
