"""Decides whether a module should run against a page.

A module declares the element kinds it is interested in. It runs when the
page has at least one element of a declared kind and auditing of that kind is
enabled. Modules that declare no interests audit every page.
"""

from typing import Iterable, Optional

from .models.options import ScanOptions
from .models.page import ElementKind, Page


def should_run(
    interests: Optional[Iterable[ElementKind]],
    page: Page,
    options: ScanOptions
) -> bool:
    """Check a module's declared element interests against a page.

    Args:
        interests: Element kinds the module audits (empty or None = any page)
        page: Page about to be audited
        options: Scan options holding the per-kind audit toggles

    Returns:
        True if the module should run against the page
    """
    if not interests:
        return True

    toggles = options.element_toggles
    for kind in interests:
        kind = ElementKind(kind)
        if page.elements_of(kind) and toggles[kind.value]:
            return True

    return False
