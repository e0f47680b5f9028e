"""Layout planning and value scaling for chart rendering.

Two layout flavours exist:

- Cartesian (bar, line, area, scatter): fixed axis margins around a plot
  rectangle, with a title band above and a legend band below.
- Radial (pie, doughnut): a square chart area centred horizontally, with a
  legend band sized to the number of categories.

Reserved bands are subtracted from the canvas as-is.  A canvas too small
for its bands yields a degenerate (zero or negative) plot area; that is
left to the caller to avoid via width/height.
"""

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TITLE_BAND = 50
LEGEND_BAND = 60
LEGEND_ROW = 35
LEGEND_MAX = 200

MARGIN_TOP = 60
MARGIN_RIGHT = 40
MARGIN_BOTTOM = 100
MARGIN_LEFT = 80

RADIAL_PADDING = 100
RADIAL_TOP_GAP = 50

TICK_COUNT = 5


# ---------------------------------------------------------------------------
# Layout plans
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlotArea:
    """The usable plot rectangle in canvas pixels."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class CartesianLayout:
    width: int
    height: int
    title_height: int
    legend_height: int
    plot: PlotArea

    @property
    def legend_y(self) -> float:
        return self.height - self.legend_height + 20

    def point_x(self, index: int, count: int) -> float:
        """X of the index-th of ``count`` evenly spaced points.

        The first and last points sit on the plot edges.  A lone point is
        centred since there is no span to spread it across.
        """
        if count <= 1:
            return self.plot.left + self.plot.width / 2
        return self.plot.left + index * (self.plot.width / (count - 1))

    def band_width(self, count: int) -> float:
        return self.plot.width / count

    def band_x(self, index: int, count: int) -> float:
        """Left edge of the index-th of ``count`` equal-width bands."""
        return self.plot.left + index * self.band_width(count)


@dataclass(frozen=True)
class RadialLayout:
    width: int
    height: int
    title_height: int
    legend_height: int
    center_x: float
    center_y: float
    radius: float

    @property
    def legend_y(self) -> float:
        return self.height - self.legend_height - 20


def plan_cartesian_layout(width: int, height: int, title_present: bool,
                          legend_present: bool) -> CartesianLayout:
    """Reserve title/legend bands and axis margins; return the plot area."""
    title_height = TITLE_BAND if title_present else 0
    legend_height = LEGEND_BAND if legend_present else 0
    plot = PlotArea(
        left=MARGIN_LEFT,
        top=MARGIN_TOP + title_height,
        width=width - MARGIN_LEFT - MARGIN_RIGHT,
        height=height - MARGIN_TOP - MARGIN_BOTTOM - legend_height - title_height,
    )
    return CartesianLayout(width, height, title_height, legend_height, plot)


def plan_radial_layout(width: int, height: int, title_present: bool,
                       legend_present: bool, label_count: int) -> RadialLayout:
    """Size the pie area after reserving one legend row per category."""
    title_height = TITLE_BAND if title_present else 0
    legend_height = min(label_count * LEGEND_ROW, LEGEND_MAX) if legend_present else 0
    chart_size = min(width - RADIAL_PADDING,
                     height - title_height - legend_height - RADIAL_PADDING)
    radius = chart_size / 2
    return RadialLayout(
        width=width,
        height=height,
        title_height=title_height,
        legend_height=legend_height,
        center_x=width / 2,
        center_y=title_height + RADIAL_TOP_GAP + radius,
        radius=radius,
    )


# ---------------------------------------------------------------------------
# Scale mapping
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScaleMapper:
    """Linear map from data values to canvas y coordinates.

    The domain always includes zero.  When every value is zero the range is
    empty and all values map to the bottom of the plot.
    """
    domain_min: float
    domain_max: float
    top: float
    bottom: float

    @classmethod
    def from_values(cls, values, plot: PlotArea) -> "ScaleMapper":
        values = list(values)
        return cls(
            domain_min=min(values + [0.0]),
            domain_max=max(values + [0.0]),
            top=plot.top,
            bottom=plot.bottom,
        )

    @property
    def value_range(self) -> float:
        return self.domain_max - self.domain_min

    @property
    def scale(self) -> float:
        """Pixels per unit; zero for a flat domain."""
        if self.value_range > 0:
            return (self.bottom - self.top) / self.value_range
        return 0.0

    def value_to_y(self, value: float) -> float:
        if self.value_range <= 0:
            return self.bottom
        return self.bottom - (value - self.domain_min) * self.scale

    @property
    def baseline_y(self) -> float:
        """Canvas y of the value zero."""
        return self.value_to_y(0.0)

    def ticks(self, count: int = TICK_COUNT) -> list[tuple[float, float]]:
        """(value, y) pairs from the domain max down to the domain min."""
        step_px = (self.bottom - self.top) / count
        step_value = self.value_range / count
        return [
            (self.domain_max - step_value * i, self.top + step_px * i)
            for i in range(count + 1)
        ]
