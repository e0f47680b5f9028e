"""Chart schema models - the contract between callers, loader, and renderer.

Defines the typed structure of a chart render request: the categories and
datasets being plotted, the options controlling canvas size and chrome,
and the custom themes that can be registered for palette lookup.

All request models are frozen dataclasses.  Sequences passed in by callers
are copied into tuples so a render call can never mutate caller data.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ChartType(Enum):
    """Supported chart families."""
    BAR = "bar"
    LINE = "line"
    AREA = "area"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    SCATTER = "scatter"

    @classmethod
    def parse(cls, value: "ChartType | str | None") -> "ChartType | None":
        """Return the member for a selector string, or None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def is_radial(self) -> bool:
        return self in (ChartType.PIE, ChartType.DOUGHNUT)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _safe_value(value: Any) -> float:
    """Coerce a value to a safe float for plotting.  None/NaN/inf -> 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return 0.0
        return float(value)
    return 0.0


def _color_value(value: Any) -> str | tuple[str, ...] | None:
    """Normalize a fill color: single string, per-index tuple, or None."""
    if value is None or isinstance(value, str):
        return value
    return tuple(str(v) for v in value)


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Dataset:
    """One named series of values aligned to the chart's category labels."""
    label: str
    values: tuple[float, ...] = ()
    fill_color: str | tuple[str, ...] | None = None    # Single or per-index
    stroke_color: str | None = None
    stroke_width: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "label", str(self.label))
        object.__setattr__(self, "values",
                           tuple(_safe_value(v) for v in self.values))
        object.__setattr__(self, "fill_color", _color_value(self.fill_color))

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"label": self.label, "values": list(self.values)}
        if self.fill_color is not None:
            d["fillColor"] = (self.fill_color if isinstance(self.fill_color, str)
                              else list(self.fill_color))
        if self.stroke_color is not None:
            d["strokeColor"] = self.stroke_color
        if self.stroke_width is not None:
            d["strokeWidth"] = self.stroke_width
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Dataset":
        values = d["values"] if "values" in d else d.get("data", [])
        return cls(
            label=d.get("label", ""),
            values=tuple(values or ()),
            fill_color=d.get("fillColor", d.get("backgroundColor")),
            stroke_color=d.get("strokeColor", d.get("borderColor")),
            stroke_width=d.get("strokeWidth", d.get("borderWidth")),
        )


# ---------------------------------------------------------------------------
# ChartSpec
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChartSpec:
    """Category labels plus the datasets plotted against them."""
    labels: tuple[str, ...] = ()
    datasets: tuple[Dataset, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", tuple(str(l) for l in self.labels))
        object.__setattr__(self, "datasets", tuple(self.datasets))

    def all_values(self) -> list[float]:
        """Every value across every dataset, in dataset order."""
        return [v for ds in self.datasets for v in ds.values]

    def to_dict(self) -> dict:
        return {
            "labels": list(self.labels),
            "datasets": [ds.to_dict() for ds in self.datasets],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ChartSpec":
        return cls(
            labels=tuple(d.get("labels") or ()),
            datasets=tuple(Dataset.from_dict(ds) for ds in d.get("datasets") or ()),
        )


# ---------------------------------------------------------------------------
# RenderOptions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderOptions:
    """Canvas size and chrome toggles for a single render call."""
    width: int = 1200
    height: int = 600
    show_legend: bool = True
    show_grid: bool = True
    show_values: bool = False
    title: str | None = None

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name.capitalize()} must be a number (got {value!r})")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Width and height must be positive numbers "
                f"(got {self.width}x{self.height})"
            )

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "width": self.width,
            "height": self.height,
            "showLegend": self.show_legend,
            "showGrid": self.show_grid,
            "showValues": self.show_values,
        }
        if self.title:
            d["title"] = self.title
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "RenderOptions":
        return cls(
            width=d.get("width", 1200),
            height=d.get("height", 600),
            show_legend=d.get("showLegend", True),
            show_grid=d.get("showGrid", True),
            show_values=d.get("showValues", False),
            title=d.get("title"),
        )


# ---------------------------------------------------------------------------
# ChartDocument: a complete render request stored as YAML
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChartDocument:
    """A chart type, theme, data, and options bundled for storage.

    ``chart_type`` is kept as the raw selector string so that a file with an
    unknown type still loads; the renderer reports it as a soft failure.
    """
    chart_type: str
    spec: ChartSpec
    theme: str = "corporate"
    options: RenderOptions = field(default_factory=RenderOptions)

    def to_dict(self) -> dict:
        return {
            "type": self.chart_type,
            "theme": self.theme,
            "data": self.spec.to_dict(),
            "options": self.options.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ChartDocument":
        chart_type = d["type"]
        if isinstance(chart_type, ChartType):
            chart_type = chart_type.value
        return cls(
            chart_type=str(chart_type),
            spec=ChartSpec.from_dict(d.get("data", {})),
            theme=d.get("theme", "corporate"),
            options=RenderOptions.from_dict(d.get("options", {})),
        )


# ---------------------------------------------------------------------------
# CustomTheme
# ---------------------------------------------------------------------------

@dataclass
class CustomTheme:
    """A caller-defined palette registered under its own theme name."""
    name: str                            # e.g. "acme-corp"
    display_name: str                    # e.g. "ACME Corporation"
    colors: list[str] = field(default_factory=list)
    description: str = ""

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "name": self.name,
            "display_name": self.display_name,
            "colors": list(self.colors),
        }
        if self.description:
            d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "CustomTheme":
        return cls(
            name=d["name"],
            display_name=d.get("display_name", d["name"]),
            colors=list(d.get("colors", [])),
            description=d.get("description", ""),
        )
