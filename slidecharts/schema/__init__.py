"""Chart schema package — typed models for chart render requests.

Provides the contract between the loader, ingestion, and chart renderer:

- models.py: Core dataclasses (ChartSpec, Dataset, RenderOptions, etc.)
- themes.py: Built-in palettes and the custom ThemeRegistry
- design_system.py: Text escaping and value formatting
- loader.py: YAML serialization/deserialization
"""

from .design_system import (
    escape,
    format_axis_value,
    format_number,
    format_percentage,
)
from .loader import load_chart, load_themes, save_chart, save_themes
from .models import (
    ChartDocument,
    ChartSpec,
    ChartType,
    CustomTheme,
    Dataset,
    RenderOptions,
)
from .themes import (
    BUILTIN_PALETTES,
    DEFAULT_THEME,
    ThemeRegistry,
    colors_for,
)

__all__ = [
    # Models
    "ChartDocument",
    "ChartSpec",
    "ChartType",
    "CustomTheme",
    "Dataset",
    "RenderOptions",
    # Themes
    "BUILTIN_PALETTES",
    "DEFAULT_THEME",
    "ThemeRegistry",
    "colors_for",
    # Loader
    "load_chart",
    "load_themes",
    "save_chart",
    "save_themes",
    # Formatting
    "escape",
    "format_axis_value",
    "format_number",
    "format_percentage",
]
