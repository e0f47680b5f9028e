"""Tests for built-in palettes and the custom theme registry."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from slidecharts.schema.models import CustomTheme
from slidecharts.schema.themes import (
    BUILTIN_PALETTES,
    DEFAULT_THEME,
    MIN_PALETTE_SIZE,
    THEME_ROLES,
    ThemeRegistry,
    colors_for,
    cycle_colors,
)


@pytest.fixture
def registry():
    return ThemeRegistry()


@pytest.fixture
def acme():
    return CustomTheme(name="acme", display_name="ACME", colors=["#ff5733", "#33c4ff"])


# ---------------------------------------------------------------------------
# Built-in palettes
# ---------------------------------------------------------------------------

class TestBuiltinPalettes:
    def test_five_themes(self):
        assert set(BUILTIN_PALETTES) == {
            "corporate", "pitch-deck", "academic", "workshop", "startup",
        }

    @pytest.mark.parametrize("theme", list(BUILTIN_PALETTES))
    def test_minimum_size(self, theme):
        assert len(BUILTIN_PALETTES[theme]) >= MIN_PALETTE_SIZE

    def test_roles_match_palette_primary(self):
        for name, roles in THEME_ROLES.items():
            assert roles["primary"] == BUILTIN_PALETTES[name][0]

    def test_palettes_immutable(self):
        with pytest.raises(TypeError):
            BUILTIN_PALETTES["corporate"] = ("#000000",)


class TestColorsFor:
    def test_default_is_corporate(self):
        assert DEFAULT_THEME == "corporate"
        assert colors_for("corporate")[0] == "#1e40af"

    def test_unknown_falls_back(self):
        assert colors_for("nope") == colors_for(DEFAULT_THEME)

    def test_none_falls_back(self):
        assert colors_for(None) == colors_for(DEFAULT_THEME)

    def test_returns_copy(self):
        colors = colors_for("startup")
        colors.append("#000000")
        assert len(colors_for("startup")) == len(BUILTIN_PALETTES["startup"])

    def test_registry_lookup(self, registry, acme):
        registry.register(acme)
        assert colors_for("acme", registry)[:2] == ["#ff5733", "#33c4ff"]

    def test_registry_falls_back_to_builtin(self, registry):
        assert colors_for("academic", registry) == list(BUILTIN_PALETTES["academic"])


class TestCycleColors:
    def test_wraps(self):
        assert cycle_colors(["a", "b"], 5) == ["a", "b", "a", "b", "a"]

    def test_zero(self):
        assert cycle_colors(["a"], 0) == []


# ---------------------------------------------------------------------------
# ThemeRegistry
# ---------------------------------------------------------------------------

class TestRegistryWrites:
    def test_register(self, registry, acme):
        registry.register(acme)
        assert registry.has("acme")
        assert "acme" in registry
        assert len(registry) == 1
        assert registry.get("acme") is acme

    def test_constructor_registers(self, acme):
        assert ThemeRegistry([acme]).names() == ["acme"]

    def test_short_palette_padded(self, registry, acme):
        registry.register(acme)
        assert registry.colors_for("acme") == [
            "#ff5733", "#33c4ff", "#1e40af", "#0891b2", "#64748b", "#0f766e",
        ]

    def test_long_palette_kept(self, registry):
        colors = [f"#00000{i}" for i in range(8)]
        registry.register(CustomTheme("long", "Long", colors))
        assert registry.colors_for("long") == colors

    def test_duplicate_rejected(self, registry, acme):
        registry.register(acme)
        with pytest.raises(ValueError, match="already exists"):
            registry.register(acme)

    def test_update(self, registry, acme):
        registry.register(acme)
        registry.update(CustomTheme("acme", "ACME v2", ["#000000"]))
        assert registry.get("acme").display_name == "ACME v2"

    def test_update_missing(self, registry, acme):
        with pytest.raises(ValueError, match="does not exist"):
            registry.update(acme)

    def test_remove(self, registry, acme):
        registry.register(acme)
        assert registry.remove("acme") is True
        assert registry.remove("acme") is False
        assert not registry.has("acme")

    def test_clear(self, registry, acme):
        registry.register(acme)
        registry.clear()
        assert len(registry) == 0

    def test_snapshot_unaffected_by_later_writes(self, registry, acme):
        before = registry.snapshot()
        registry.register(acme)
        assert "acme" not in before
        assert "acme" in registry.snapshot()


class TestRegistryValidation:
    @pytest.mark.parametrize("name", ["ACME", "acme corp", "-acme", "acme-", "a--b", ""])
    def test_bad_names(self, registry, name):
        with pytest.raises(ValueError):
            registry.register(CustomTheme(name, "Display", ["#000000"]))

    def test_hyphenated_name_ok(self, registry):
        registry.register(CustomTheme("acme-corp-2", "ACME", ["#000000"]))
        assert registry.has("acme-corp-2")

    def test_builtin_name_rejected(self, registry):
        with pytest.raises(ValueError, match="predefined"):
            registry.register(CustomTheme("corporate", "Mine", ["#000000"]))

    def test_empty_display_name(self, registry):
        with pytest.raises(ValueError, match="display name"):
            registry.register(CustomTheme("acme", "", ["#000000"]))

    def test_empty_colors(self, registry):
        with pytest.raises(ValueError, match="no colors"):
            registry.register(CustomTheme("acme", "ACME", []))

    @pytest.mark.parametrize("color", ["red", "#fff", "#12345g", "1e40af"])
    def test_bad_colors(self, registry, color):
        with pytest.raises(ValueError, match="hex color"):
            registry.register(CustomTheme("acme", "ACME", [color]))

    def test_failed_register_leaves_registry_untouched(self, registry):
        with pytest.raises(ValueError):
            registry.register(CustomTheme("acme", "ACME", ["nope"]))
        assert len(registry) == 0


class TestRegistryConcurrency:
    def test_parallel_registration(self, registry):
        def add(i):
            registry.register(CustomTheme(f"theme-{i}", f"Theme {i}", ["#123456"]))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(add, range(50)))
        assert len(registry) == 50
