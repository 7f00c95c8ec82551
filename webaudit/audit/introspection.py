"""Listing of registered modules, reports and plugins.

Each listing resolves the declared metadata of every registered component,
adds the component's name and source path and, by default, unloads the
registry afterwards so that listing never leaves components loaded.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from .components.base import ComponentRegistry


logger = logging.getLogger(__name__)


def _list_components(
    registry: ComponentRegistry,
    name_key: str,
    filters: Optional[List[str]] = None,
    unload_after_list: bool = True
) -> List[Dict[str, Any]]:
    compiled = [re.compile(pattern) for pattern in (filters or [])]

    listing = []
    for name in registry.available():
        path = registry.name_to_path(name)
        if not all(pattern.search(path) for pattern in compiled):
            continue

        entry = registry.info(name).model_dump(mode="json")
        entry[name_key] = name
        entry["path"] = path
        listing.append(entry)

    if unload_after_list:
        registry.clear()

    logger.debug(f"Listed {len(listing)} {registry.component_type}(s)")
    return listing


def list_modules(
    registry: ComponentRegistry,
    filters: Optional[List[str]] = None,
    unload_after_list: bool = True
) -> List[Dict[str, Any]]:
    """List check modules whose source path matches every filter pattern.

    Args:
        registry: Module registry
        filters: Regex patterns; a module is listed only if its path matches
            all of them
        unload_after_list: Clear the registry once listed

    Returns:
        Module metadata with ``mod_name`` and ``path`` added
    """
    return _list_components(registry, "mod_name", filters, unload_after_list)


def list_reports(
    registry: ComponentRegistry,
    unload_after_list: bool = True
) -> List[Dict[str, Any]]:
    """List reports with ``rep_name`` and ``path`` added to their metadata."""
    return _list_components(registry, "rep_name", None, unload_after_list)


def list_plugins(
    registry: ComponentRegistry,
    unload_after_list: bool = True
) -> List[Dict[str, Any]]:
    """List plugins with ``plug_name`` and ``path`` added to their metadata."""
    return _list_components(registry, "plug_name", None, unload_after_list)
