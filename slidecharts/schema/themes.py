"""Theme palettes — built-in chart palettes and the custom theme registry.

A theme identifier resolves to an ordered list of at least six colors.
Datasets (or pie slices) take colors by position, cycling when there are
more series than colors.  Unknown identifiers fall back to the default
palette; resolution never raises.

Custom themes live in an explicit ``ThemeRegistry`` value that callers
pass to the renderer.  Writes are serialized by a lock and reads work on
an immutable snapshot, so a registration never disturbs a render running
on another thread.
"""

import re
import threading
from types import MappingProxyType
from typing import Mapping

from .models import CustomTheme


# ---------------------------------------------------------------------------
# Built-in palettes
# ---------------------------------------------------------------------------

DEFAULT_THEME = "corporate"
MIN_PALETTE_SIZE = 6

BUILTIN_PALETTES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "corporate": ("#1e40af", "#0891b2", "#64748b", "#0f766e", "#0369a1", "#1e3a8a"),
    "pitch-deck": ("#7c3aed", "#ec4899", "#f59e0b", "#8b5cf6", "#d946ef", "#fb923c"),
    "academic": ("#1e3a8a", "#92400e", "#065f46", "#7c2d12", "#14532d", "#1e40af"),
    "workshop": ("#2563eb", "#10b981", "#f97316", "#14b8a6", "#06b6d4", "#f59e0b"),
    "startup": ("#0ea5e9", "#8b5cf6", "#06b6d4", "#3b82f6", "#a855f7", "#0284c7"),
})

# Named color roles used by the shape builder for ``var(--slidey-*)`` fills.
THEME_ROLES: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "corporate": {
        "primary": "#1e40af", "secondary": "#0891b2", "accent": "#64748b",
        "background": "#ffffff", "surface": "#f8fafc", "text": "#1e293b",
    },
    "pitch-deck": {
        "primary": "#7c3aed", "secondary": "#ec4899", "accent": "#f59e0b",
        "background": "#ffffff", "surface": "#faf5ff", "text": "#1e293b",
    },
    "academic": {
        "primary": "#1e3a8a", "secondary": "#92400e", "accent": "#065f46",
        "background": "#ffffff", "surface": "#f8fafc", "text": "#1e293b",
    },
    "workshop": {
        "primary": "#2563eb", "secondary": "#10b981", "accent": "#f97316",
        "background": "#ffffff", "surface": "#fef3c7", "text": "#1e293b",
    },
    "startup": {
        "primary": "#0ea5e9", "secondary": "#8b5cf6", "accent": "#06b6d4",
        "background": "#ffffff", "surface": "#f0f9ff", "text": "#1e293b",
    },
})

_THEME_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _pad_palette(colors: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Extend a short palette with default colors up to the minimum size."""
    palette = list(colors)
    default = BUILTIN_PALETTES[DEFAULT_THEME]
    i = 0
    while len(palette) < MIN_PALETTE_SIZE:
        palette.append(default[i % len(default)])
        i += 1
    return tuple(palette)


def colors_for(theme_id: str | None, registry: "ThemeRegistry | None" = None) -> list[str]:
    """Resolve a theme identifier to its ordered palette.

    Custom themes in ``registry`` take precedence over built-ins.  Anything
    unknown resolves to the default palette.
    """
    if registry is not None:
        return registry.colors_for(theme_id)
    palette = BUILTIN_PALETTES.get(theme_id or "", BUILTIN_PALETTES[DEFAULT_THEME])
    return list(palette)


def cycle_colors(palette: list[str], count: int) -> list[str]:
    """Assign ``count`` colors from ``palette`` by position, wrapping around."""
    return [palette[i % len(palette)] for i in range(count)]


# ---------------------------------------------------------------------------
# ThemeRegistry
# ---------------------------------------------------------------------------

class ThemeRegistry:
    """Holds caller-registered custom themes.

    Parameters
    ----------
    themes : iterable of CustomTheme, optional
        Themes to register up front.
    """

    def __init__(self, themes=None) -> None:
        self._lock = threading.Lock()
        self._themes: Mapping[str, CustomTheme] = MappingProxyType({})
        for theme in themes or ():
            self.register(theme)

    # -- validation --------------------------------------------------------

    @staticmethod
    def _validate(theme: CustomTheme) -> None:
        if not _THEME_NAME_RE.match(theme.name or ""):
            raise ValueError(
                f"Theme name {theme.name!r} must be lowercase alphanumeric "
                "with hyphens only"
            )
        if theme.name in BUILTIN_PALETTES:
            raise ValueError(
                f"Theme name {theme.name!r} cannot conflict with predefined themes"
            )
        if not theme.display_name:
            raise ValueError(f"Theme {theme.name!r} has no display name")
        if not theme.colors:
            raise ValueError(f"Theme {theme.name!r} has no colors")
        for color in theme.colors:
            if not isinstance(color, str) or not _HEX_COLOR_RE.match(color):
                raise ValueError(
                    f"Theme {theme.name!r} color {color!r} is not a #RRGGBB hex color"
                )

    # -- writes ------------------------------------------------------------

    def register(self, theme: CustomTheme) -> None:
        """Add a new custom theme.

        Raises:
            ValueError: If the theme is malformed or the name is taken.
        """
        self._validate(theme)
        with self._lock:
            if theme.name in self._themes:
                raise ValueError(
                    f'Theme "{theme.name}" already exists. Use a different '
                    "name or clear the registry first."
                )
            themes = dict(self._themes)
            themes[theme.name] = theme
            self._themes = MappingProxyType(themes)

    def update(self, theme: CustomTheme) -> None:
        """Replace an existing custom theme.

        Raises:
            ValueError: If the theme is malformed or not registered.
        """
        self._validate(theme)
        with self._lock:
            if theme.name not in self._themes:
                raise ValueError(
                    f'Theme "{theme.name}" does not exist. Use register() '
                    "to create it first."
                )
            themes = dict(self._themes)
            themes[theme.name] = theme
            self._themes = MappingProxyType(themes)

    def remove(self, name: str) -> bool:
        """Remove a theme.  Returns False if it was not registered."""
        with self._lock:
            if name not in self._themes:
                return False
            themes = dict(self._themes)
            del themes[name]
            self._themes = MappingProxyType(themes)
            return True

    def clear(self) -> None:
        with self._lock:
            self._themes = MappingProxyType({})

    # -- reads -------------------------------------------------------------

    def snapshot(self) -> Mapping[str, CustomTheme]:
        """Read-only view of the registered themes at this instant."""
        return self._themes

    def get(self, name: str) -> CustomTheme | None:
        return self._themes.get(name)

    def has(self, name: str) -> bool:
        return name in self._themes

    def names(self) -> list[str]:
        return list(self._themes)

    def __len__(self) -> int:
        return len(self._themes)

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def colors_for(self, theme_id: str | None) -> list[str]:
        """Resolve a palette: custom theme, then built-in, then default."""
        theme = self._themes.get(theme_id or "")
        if theme is not None:
            return list(_pad_palette(theme.colors))
        return colors_for(theme_id)
