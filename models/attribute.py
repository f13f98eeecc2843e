# models/attribute.py
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional
import time


@dataclass(frozen=True)
class AttributeRef:
    """Identifies one live data point: (asset id, attribute name)."""
    asset_id: str
    attribute_name: str


@dataclass(frozen=True)
class Attribute:
    name: str
    type: str = "number"
    value: Any = None
    timestamp: Optional[float] = None
    meta: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Asset:
    """
    Immutable snapshot of an asset's attributes as last observed. Updates
    produce a new snapshot so change detection can compare by identity.
    """
    id: str
    name: str = ""
    type: str = "ThingAsset"
    attributes: Mapping[str, Attribute] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get_attribute(self, name) -> Optional[Attribute]:
        return self.attributes.get(name)

    def with_attribute_value(self, name, value, timestamp=None) -> "Asset":
        """Returns a copy of this asset with one attribute's value replaced."""
        if timestamp is None:
            timestamp = time.time()
        current = self.attributes.get(name)
        if current is None:
            updated = Attribute(name=name, value=value, timestamp=timestamp)
        else:
            updated = replace(current, value=value, timestamp=timestamp)
        attributes = dict(self.attributes)
        attributes[name] = updated
        return replace(self, attributes=attributes)


@dataclass(frozen=True)
class AttributeEvent:
    """A single pushed attribute value."""
    ref: AttributeRef
    value: Any
    timestamp: float = field(default_factory=time.time)


def ref_matches(ref, other):
    """Structural equality that tolerates None on either side."""
    if ref is None or other is None:
        return False
    return ref.asset_id == other.asset_id and ref.attribute_name == other.attribute_name
