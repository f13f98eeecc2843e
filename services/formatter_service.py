# services/formatter_service.py
from dataclasses import dataclass
from typing import Optional
from config import VALUE_PLACEHOLDER, VALUE_TYPE_COLOUR_RGB


@dataclass(frozen=True)
class ValueDescriptor:
    name: str
    units: Optional[str] = None
    decimals: Optional[int] = None


class AttributeFormatter:
    """
    Turns attribute values into display strings. Units and precision are read
    from the attribute's meta ('units', 'decimals').
    """

    def describe(self, asset, attribute_name, attribute):
        if attribute is None:
            return ValueDescriptor(name=attribute_name)
        return ValueDescriptor(
            name=attribute.type,
            units=attribute.meta.get("units"),
            decimals=attribute.meta.get("decimals"),
        )

    def format(self, attribute, descriptor, asset_type, with_units=True, placeholder=VALUE_PLACEHOLDER):
        if attribute is None or attribute.value is None:
            return placeholder
        value = attribute.value
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, float) and descriptor is not None and descriptor.decimals is not None:
            text = f"{value:.{descriptor.decimals}f}"
        else:
            text = str(value)
        if text == "":
            return placeholder
        if with_units and descriptor is not None and descriptor.units:
            text = f"{text} {descriptor.units}"
        return text

    @staticmethod
    def is_colour(attribute):
        return attribute is not None and attribute.type == VALUE_TYPE_COLOUR_RGB
