# services/marker_service.py
from dataclasses import dataclass, replace
from typing import Optional
from config import DEFAULT_MARKER_COORDINATES, MARKER_COORDINATE_MIN, MARKER_COORDINATE_MAX, VALUE_PLACEHOLDER
from models.errors import ConsistencyError, InvalidNumericInput
from models.widget_config import Marker
from services.formatter_service import AttributeFormatter
from utils import clamp, log_message, to_number


@dataclass(frozen=True)
class ResolvedMarker:
    """What the renderer needs for one marker: where it goes and what it shows."""
    attribute_ref: object
    left: float
    top: float
    text: Optional[str] = None
    swatch: Optional[str] = None
    asset_name: Optional[str] = None
    label: Optional[str] = None


class MarkerSyncResolver:
    """
    Keeps image/web widget markers in step with the attribute reference list and
    resolves them for rendering. Markers are matched to references structurally,
    never by position, because the two lists drift apart as edits arrive.
    """

    def __init__(self, formatter=None):
        self._formatter = formatter or AttributeFormatter()

    def sync(self, config):
        """
        Adds a centred marker for every reference that has none. Markers for
        references that were removed are kept.
        """
        markers = list(config.markers)
        known = {m.attribute_ref for m in markers}
        for ref in config.attribute_refs:
            if ref not in known:
                markers.append(Marker(attribute_ref=ref, coordinates=DEFAULT_MARKER_COORDINATES))
                known.add(ref)
        if len(markers) == len(config.markers):
            return config
        return replace(config, markers=markers)

    def find_marker(self, config, ref) -> Marker:
        for marker in config.markers:
            if marker.attribute_ref == ref:
                return marker
        raise ConsistencyError(f"No marker for {ref.asset_id}/{ref.attribute_name}")

    def resolve(self, config, cached_assets):
        """Returns one ResolvedMarker per reference that has a marker."""
        resolved = []
        for ref in config.attribute_refs:
            try:
                marker = self.find_marker(config, ref)
            except ConsistencyError as e:
                log_message(f"ERROR: {e}; marker not rendered.")
                continue
            resolved.append(self._resolve_one(ref, marker, cached_assets))
        return resolved

    def _resolve_one(self, ref, marker, cached_assets):
        left, top = marker.coordinates
        asset = next((a for a in cached_assets if a.id == ref.asset_id), None)
        if asset is None:
            return ResolvedMarker(attribute_ref=ref, left=left, top=top)
        attribute = asset.get_attribute(ref.attribute_name)
        descriptor = self._formatter.describe(asset, ref.attribute_name, attribute)
        value = self._formatter.format(attribute, descriptor, asset.type, True, VALUE_PLACEHOLDER)
        if self._formatter.is_colour(attribute) and value != VALUE_PLACEHOLDER:
            return ResolvedMarker(attribute_ref=ref, left=left, top=top, swatch=value,
                                  asset_name=asset.name, label=ref.attribute_name)
        return ResolvedMarker(attribute_ref=ref, left=left, top=top, text=value,
                              asset_name=asset.name, label=ref.attribute_name)

    def set_coordinate(self, config, index, axis, value):
        """Writes one coordinate of the marker at `index`, clamped to [0, 100]."""
        if not 0 <= index < len(config.markers):
            log_message(f"ERROR: No marker at index {index}; coordinate not changed.")
            return config
        position = 0 if axis == "x" else 1
        try:
            number = to_number(value)
            if number is None:
                raise InvalidNumericInput(value, DEFAULT_MARKER_COORDINATES[position])
        except InvalidNumericInput as e:
            log_message(f"Warning: {e}")
            number = e.fallback
        coordinates = list(config.markers[index].coordinates)
        coordinates[position] = clamp(number, MARKER_COORDINATE_MIN, MARKER_COORDINATE_MAX)
        markers = list(config.markers)
        markers[index] = replace(markers[index], coordinates=tuple(coordinates))
        return replace(config, markers=markers)
