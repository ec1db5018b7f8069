"""Bootstrap script generation.

This module renders the ``initializePage(...)`` call that hands the
catalog and its presentation settings to the front-end page script.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from core.constants import BOOTSTRAP_FUNCTION_NAME
from core.site_config import SiteConfig


def build_module_info_js(
    modules: Sequence[Mapping[str, Any]],
    site_config: SiteConfig,
    load_errors: Sequence[str],
    contact_info: Mapping[str, Any],
) -> str:
    """Render the page bootstrap call.

    Args:
        modules: Published JSON of every non-translation module.
        site_config: Display, filter, selectable, and document settings.
        load_errors: Per-file load errors of this run.
        contact_info: Parsed contact information document.

    Returns:
        JavaScript statement text.
    """
    arguments = [
        list(modules),
        site_config.icon_dirs(),
        site_config.document_dir_names(),
        list(site_config.displays),
        [dict(item) for item in site_config.filters],
        [dict(item) for item in site_config.selectables],
        {status: dict(annotation) for status, annotation in site_config.souvenir.items()},
        list(load_errors),
        dict(contact_info),
    ]
    rendered = ",".join(_to_js_literal(argument) for argument in arguments)
    return f"{BOOTSTRAP_FUNCTION_NAME}({rendered});"


def _to_js_literal(value: object) -> str:
    # Script text must not contain raw U+2028/U+2029 line separators.
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return text.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")
