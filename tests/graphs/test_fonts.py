"""Tests for apde_graphs.fonts."""

from __future__ import annotations

from apde_graphs.fonts import (
    FALLBACK_FAMILY,
    FontResolver,
    MatplotlibFontResolver,
    StaticFontResolver,
    resolve_family,
)


class TestStaticFontResolver:
    def test_exact_match_case_insensitive(self):
        assert StaticFontResolver(["Arial Black", "Arial"]).resolve("arial") == "Arial"

    def test_substring_match_returns_first(self):
        resolver = StaticFontResolver(["DejaVu Sans", "DejaVu Serif"])
        assert resolver.resolve("dejavu") == "DejaVu Sans"

    def test_no_match(self):
        assert StaticFontResolver(["Georgia"]).resolve("Arial") is None

    def test_empty_name_never_matches(self):
        assert StaticFontResolver(["Georgia"]).resolve("") is None

    def test_satisfies_protocol(self):
        assert isinstance(StaticFontResolver([]), FontResolver)


class TestMatplotlibFontResolver:
    def test_finds_bundled_font(self):
        # matplotlib always ships DejaVu Sans
        assert MatplotlibFontResolver().resolve("DejaVu Sans") == "DejaVu Sans"

    def test_families_sorted_unique(self):
        families = MatplotlibFontResolver().families()
        assert families == sorted(set(families))

    def test_satisfies_protocol(self):
        assert isinstance(MatplotlibFontResolver(), FontResolver)


class TestResolveFamily:
    def test_exact_is_silent(self, log_records):
        assert resolve_family("Georgia", StaticFontResolver(["Georgia"])) == "Georgia"
        assert log_records == []

    def test_mapped_logs_info(self, log_records):
        assert resolve_family("georgia", StaticFontResolver(["Georgia"])) == "Georgia"
        assert [r["level"].name for r in log_records] == ["INFO"]
        assert log_records[0]["message"] == "'georgia' mapped to the 'Georgia' font family"

    def test_fallback_logs_warning(self, log_records):
        assert resolve_family("Comic Sans", StaticFontResolver(["Georgia"])) == FALLBACK_FAMILY
        assert [r["level"].name for r in log_records] == ["WARNING"]
        assert "Comic Sans" in log_records[0]["message"]

    def test_default_resolver_never_unresolved(self):
        family = resolve_family("No Such Font Family 12345")
        assert family == FALLBACK_FAMILY
