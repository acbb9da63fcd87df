"""Font family lookup for the house theme.

The host font registry is global, mutable and differs between machines, so
theme code only ever talks to a ``FontResolver``. Tests inject a
``StaticFontResolver``; everything else uses matplotlib's registry.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from loguru import logger

FALLBACK_FAMILY = "sans-serif"


@runtime_checkable
class FontResolver(Protocol):
    def resolve(self, name: str) -> str | None:
        """Return the registered family matching ``name``, or None."""
        ...


def _match(name: str, families: Iterable[str]) -> str | None:
    # Exact (case-insensitive) hit wins over the first substring hit
    if not name:
        return None
    needle = name.lower()
    first = None
    for family in families:
        lowered = family.lower()
        if lowered == needle:
            return family
        if first is None and needle in lowered:
            first = family
    return first


class StaticFontResolver:
    """Resolve against a fixed list of family names."""

    def __init__(self, families: Iterable[str]) -> None:
        self.families = tuple(families)

    def resolve(self, name: str) -> str | None:
        return _match(name, self.families)


class MatplotlibFontResolver:
    """Resolve against the fonts matplotlib has registered on this host."""

    def families(self) -> list[str]:
        from matplotlib import font_manager

        return sorted({entry.name for entry in font_manager.fontManager.ttflist})

    def resolve(self, name: str) -> str | None:
        return _match(name, self.families())


def resolve_family(requested: str, resolver: FontResolver | None = None) -> str:
    """Map ``requested`` to a usable family name, never an unresolved one."""
    resolver = resolver or MatplotlibFontResolver()
    canonical = resolver.resolve(requested)
    if canonical is None:
        logger.warning(
            "Requested font '{requested}' not found. Using system sans font ({fallback})",
            requested=requested,
            fallback=FALLBACK_FAMILY,
        )
        return FALLBACK_FAMILY
    if canonical != requested:
        logger.info(
            "'{requested}' mapped to the '{canonical}' font family",
            requested=requested,
            canonical=canonical,
        )
    return canonical
