# models/widget_config.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import uuid

from config import (
    DEFAULT_MARKER_COORDINATES, DEFAULT_GRID_INTENSITY, DEFAULT_GRID_DENSITY,
    QUERY_TYPE_INTERVAL, DEFAULT_INTERVAL_FORMULA, DEFAULT_INTERVAL_SECONDS, DEFAULT_TIME_PRESET_KEY,
)
from models.attribute import AttributeRef
from models.chart_options import default_chart_options


@dataclass(frozen=True)
class Marker:
    """A visual anchor for one attribute, placed at percentage coordinates."""
    attribute_ref: AttributeRef
    coordinates: Tuple[float, float] = DEFAULT_MARKER_COORDINATES


@dataclass(frozen=True)
class DatapointQuery:
    """Tagged query used to fetch chart history. `formula` applies to 'interval' only."""
    type: str = QUERY_TYPE_INTERVAL
    formula: str = DEFAULT_INTERVAL_FORMULA
    interval: float = DEFAULT_INTERVAL_SECONDS


@dataclass
class WidgetConfig:
    """Fields shared by every widget kind. Treated as a value: edits produce a new instance."""
    kind = "widget"

    id: str = field(default_factory=lambda: f"widget_{uuid.uuid4().hex[:8]}")
    attribute_refs: List[AttributeRef] = field(default_factory=list)
    show_timestamp_controls: bool = False

    def all_attribute_refs(self) -> List[AttributeRef]:
        """Every attribute the widget needs live values for."""
        return list(self.attribute_refs)


@dataclass
class ChartWidgetConfig(WidgetConfig):
    kind = "chart"

    # Ordered set: insertion order is kept, position carries no meaning.
    right_axis_attributes: List[AttributeRef] = field(default_factory=list)
    chart_options: dict = field(default_factory=default_chart_options)
    datapoint_query: DatapointQuery = field(default_factory=DatapointQuery)
    default_time_preset_key: str = DEFAULT_TIME_PRESET_KEY
    show_legend: bool = True
    # None until the user toggles it; intensity edits show the grid unless it was turned off.
    show_grid: Optional[bool] = None
    grid_x_intensity: float = DEFAULT_GRID_INTENSITY
    grid_y_intensity: float = DEFAULT_GRID_INTENSITY
    grid_x_density: float = DEFAULT_GRID_DENSITY
    grid_y_density: float = DEFAULT_GRID_DENSITY


@dataclass
class ResourceWidgetConfig(WidgetConfig):
    """
    A widget that shows an external resource (image, web page) with attribute
    markers on top. `resource_url_attribute_ref`, when set, overrides
    `resource_path` with the attribute's current value.
    """
    kind = "resource"

    markers: List[Marker] = field(default_factory=list)
    resource_path: str = ""
    resource_url_attribute_ref: Optional[AttributeRef] = None

    def all_attribute_refs(self) -> List[AttributeRef]:
        refs = list(self.attribute_refs)
        if self.resource_url_attribute_ref is not None and self.resource_url_attribute_ref not in refs:
            refs.append(self.resource_url_attribute_ref)
        return refs


@dataclass
class ImageWidgetConfig(ResourceWidgetConfig):
    kind = "image"


@dataclass
class WebWidgetConfig(ResourceWidgetConfig):
    kind = "web"
