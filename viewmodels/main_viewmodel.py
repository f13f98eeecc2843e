# viewmodels/main_viewmodel.py
from dataclasses import dataclass
from typing import Any
from services.event_channel import LocalEventChannel
from state import app_state
from utils import log_message
from viewmodels.widget_registry import create_default_registry


@dataclass
class WidgetEntry:
    config: Any
    content: Any
    settings: Any


class MainViewModel:
    """
    Hosts the dashboard's widgets. It owns the current config of every widget
    and is the single place configuration changes are routed through.
    """

    def __init__(self, provider=None, channel=None, registry=None, formatter=None):
        self.registry = registry or create_default_registry()
        self._provider = provider
        self._formatter = formatter
        self.channel = channel if channel is not None else LocalEventChannel()
        self.widgets = {}
        self.widget_order = []
        self.selected_widget_id = None
        self.config_change_count = 0
        self.log_messages = app_state["log_messages"]
        self._dirty_layout = True
        app_state["is_running"] = True
        log_message("Dashboard ready.")

    # --- Widgets ---

    def add_widget(self, kind, config=None):
        manifest = self.registry.get(kind)
        config = config if config is not None else manifest.default_config()
        content = manifest.create_content(config, self.channel, self._provider, self._formatter)
        self.widgets[config.id] = WidgetEntry(config=config, content=content, settings=None)
        self.widget_order.append(config.id)
        # Settings may normalise the config (e.g. add markers) and report back.
        self.widgets[config.id].settings = manifest.create_settings(
            self.widgets[config.id].config, self, self._provider, self._formatter)
        content.connect()
        log_message(f"Added {manifest.display_name} widget {config.id}.")
        self._dirty_layout = True
        return config.id

    def remove_widget(self, widget_id):
        entry = self.widgets.pop(widget_id, None)
        if entry is None:
            return
        entry.content.disconnect()
        self.widget_order.remove(widget_id)
        if self.selected_widget_id == widget_id:
            self.selected_widget_id = None
        log_message(f"Removed widget {widget_id}.")
        self._dirty_layout = True

    def select_widget(self, widget_id):
        self.selected_widget_id = widget_id if widget_id in self.widgets else None
        self._dirty_layout = True

    def get_widget(self, widget_id):
        return self.widgets.get(widget_id)

    @property
    def selected(self):
        return self.widgets.get(self.selected_widget_id)

    def notify_config_changed(self, widget_id, config):
        """Host hook: a settings panel produced a new config for `widget_id`."""
        entry = self.widgets.get(widget_id)
        if entry is None:
            return
        self.config_change_count += 1
        entry.config = config
        entry.content.set_config(config)
        if entry.settings is not None:
            entry.settings.set_config(config)
        self._dirty_layout = True

    # --- Frame loop ---

    def update(self):
        """Delivers queued attribute events. Returns the number delivered."""
        return self.channel.update()

    def consume_layout_change(self):
        dirty = self._dirty_layout
        self._dirty_layout = False
        return dirty

    def disconnect(self):
        for widget_id in list(self.widget_order):
            self.widgets[widget_id].content.disconnect()
        if hasattr(self.channel, "disconnect"):
            self.channel.disconnect()
        app_state["is_running"] = False
