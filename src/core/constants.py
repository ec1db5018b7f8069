"""Core constants used across catalog modules.

This module centralizes directory names, grid geometry, and feed defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_BASE_DIR = Path(".")
DESCRIPTOR_DIR_NAME = "JSON"
ICON_DIR_NAME = "Icons"
CONTACT_INFO_FILE_NAME = "ContactInfo.json"
SITE_CONFIG_FILE_NAME = "site.yaml"
DESCRIPTOR_GLOB = "*.json"
ICON_GLOB = "*.png"
BLANK_ICON_FILE_NAME = "blank.png"
ICON_GRID_COLUMNS = 40
ICON_CELL_WIDTH = 32
ICON_CELL_HEIGHT = 32
ICON_CSS_SELECTOR = ".mod-icon"
DEFAULT_TP_FEED_URL = (
    "https://spreadsheets.google.com/feeds/list/"
    "1G6hZW0RibjW7n72AkXZgDTHZ-LKj0usRkbAwxSPhcqA/1/public/values?alt=json"
)
DEFAULT_TIME_MODE_FEED_URL = (
    "https://spreadsheets.google.com/feeds/list/"
    "16lz2mCqRWxq__qnamgvlD0XwTuva4jIDW1VPWX49hzM/1/public/values?alt=json"
)
DEFAULT_FEED_TIMEOUT_SECONDS = 30.0
FEED_NAME_FIELD = "modulename"
LEGACY_FEED_FIELD_PREFIX = "gsx$"
LEGACY_FEED_VALUE_KEY = "$t"
DEFAULT_TIME_MODE_SCORE = "10"
HTML_MANUAL_EXTENSION = ".html"
PDF_MANUAL_EXTENSION = ".pdf"
MODULES_JSON_ROOT_KEY = "KtaneModules"
BOOTSTRAP_FUNCTION_NAME = "initializePage"
