# viewmodels/widget_registry.py
"""
Widget kinds available on a dashboard. Each kind is described by a manifest;
the dashboard looks kinds up here instead of branching on type.
"""
from dataclasses import dataclass, fields
from typing import Callable
from models.widget_config import ChartWidgetConfig, ImageWidgetConfig, WebWidgetConfig
from viewmodels.settings_viewmodel import ChartSettings, ImageSettings, WebSettings
from viewmodels.widget_viewmodel import ChartWidgetViewModel, ResourceWidgetViewModel


@dataclass(frozen=True)
class WidgetManifest:
    kind: str
    display_name: str
    display_icon: str
    config_type: type
    content_factory: Callable
    settings_factory: Callable
    min_column_width: int = 1
    min_column_height: int = 1

    def default_config(self):
        return self.config_type()

    def config_schema(self):
        """Field name -> type name for the widget's config."""
        return {f.name: getattr(f.type, "__name__", str(f.type)) for f in fields(self.config_type)}

    def create_content(self, config, channel=None, provider=None, formatter=None):
        return self.content_factory(config, channel, provider, formatter)

    def create_settings(self, config, host, provider=None, formatter=None):
        return self.settings_factory(config, host, provider, formatter)


class WidgetRegistry:

    def __init__(self):
        self._manifests = {}

    def register(self, manifest):
        if manifest.kind in self._manifests:
            raise ValueError(f"Widget kind '{manifest.kind}' is already registered")
        self._manifests[manifest.kind] = manifest

    def get(self, kind) -> WidgetManifest:
        manifest = self._manifests.get(kind)
        if manifest is None:
            raise KeyError(f"Unknown widget kind '{kind}'")
        return manifest

    def kinds(self):
        return list(self._manifests)

    def __contains__(self, kind):
        return kind in self._manifests


def create_default_registry():
    registry = WidgetRegistry()
    registry.register(WidgetManifest(
        kind="chart", display_name="Line chart", display_icon="chart-line",
        config_type=ChartWidgetConfig, content_factory=ChartWidgetViewModel, settings_factory=ChartSettings,
        min_column_width=2, min_column_height=2))
    registry.register(WidgetManifest(
        kind="image", display_name="Image", display_icon="file-image-marker",
        config_type=ImageWidgetConfig, content_factory=ResourceWidgetViewModel, settings_factory=ImageSettings))
    registry.register(WidgetManifest(
        kind="web", display_name="Web page", display_icon="web",
        config_type=WebWidgetConfig, content_factory=ResourceWidgetViewModel, settings_factory=WebSettings))
    return registry
