"""Chart loader — YAML serialization and deserialization for charts and themes.

Provides round-trip save/load so chart definitions and brand palettes can be
reviewed, version-controlled, and edited as human-readable YAML files.
"""

from pathlib import Path

import yaml

from .models import ChartDocument, CustomTheme
from .themes import ThemeRegistry


def _dump(data: dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def save_chart(document: ChartDocument, path: str | Path) -> None:
    """Serialize a ChartDocument to a YAML file."""
    _dump(document.to_dict(), Path(path))


def load_chart(path: str | Path) -> ChartDocument:
    """Deserialize a ChartDocument from a YAML file."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Chart file {path} does not contain a mapping")
    return ChartDocument.from_dict(data)


def load_themes(path: str | Path, registry: ThemeRegistry | None = None) -> ThemeRegistry:
    """Register every theme listed under ``themes:`` in a YAML file.

    Returns the registry the themes were added to (a new one if none given).
    """
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if registry is None:
        registry = ThemeRegistry()
    for entry in data.get("themes", []):
        registry.register(CustomTheme.from_dict(entry))
    return registry


def save_themes(registry: ThemeRegistry, path: str | Path) -> None:
    """Write the registry's custom themes to a YAML file."""
    themes = registry.snapshot()
    _dump({"themes": [t.to_dict() for t in themes.values()]}, Path(path))
