# ui_manager.py
import dearpygui.dearpygui as dpg
import numpy as np
from config import X_AXIS_TIME_UNITS, INTERVAL_FORMULAS
from models.attribute import AttributeRef


def parse_refs(text):
    """Parses 'asset:attribute, asset:attribute' into AttributeRefs, skipping malformed entries."""
    refs = []
    for part in (text or "").split(","):
        asset_id, sep, name = part.strip().partition(":")
        if sep and asset_id and name:
            ref = AttributeRef(asset_id=asset_id.strip(), attribute_name=name.strip())
            if ref not in refs:
                refs.append(ref)
    return refs


def format_refs(refs):
    return ", ".join(f"{r.asset_id}:{r.attribute_name}" for r in refs)


def parse_colour(value):
    """'#rrggbb' -> (r, g, b, 255); anything else -> grey."""
    text = (value or "").lstrip("#")
    if len(text) != 6:
        return (128, 128, 128, 255)
    try:
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16), 255)
    except ValueError:
        return (128, 128, 128, 255)


def axis_limits(low, high, values):
    """
    Limits for one y axis. None means fully automatic. A single bound is kept
    and the open side follows the data on that axis.
    """
    if low is None and high is None:
        return None
    if low is None or high is None:
        values = np.asarray(values, dtype=float)
        if low is None:
            low = float(values.min()) if values.size else high - 1.0
        else:
            high = float(values.max()) if values.size else low + 1.0
    if high <= low:
        high = low + 1.0
    return low, high


class UIManager:
    def __init__(self, viewmodel):
        self._viewmodel = viewmodel
        self._series_tags = {}
        self._axis_tags = {}
        self._resource_tags = {}

    def create_all_ui_panels(self):
        with dpg.window(tag="primary_window"):
            with dpg.group(horizontal=True):
                with dpg.child_window(width=220, height=-160, border=True):
                    self._create_widget_list_panel()
                with dpg.child_window(width=-380, height=-160, border=True):
                    dpg.add_group(tag="dashboard_content")
                with dpg.child_window(width=-1, height=-160, border=True):
                    dpg.add_text("Settings")
                    dpg.add_separator()
                    dpg.add_group(tag="settings_content")
            self._create_log_panel()

    def _create_widget_list_panel(self):
        dpg.add_text("Add Widget")
        for kind in self._viewmodel.registry.kinds():
            manifest = self._viewmodel.registry.get(kind)
            dpg.add_button(label=manifest.display_name, width=-1,
                           callback=lambda s, a, u: self._viewmodel.add_widget(u), user_data=kind)
        dpg.add_separator()
        dpg.add_text("Widgets")
        dpg.add_group(tag="widget_list_content")

    def _create_log_panel(self):
        with dpg.child_window(height=150, border=True):
            dpg.add_text("Event Log")
            dpg.add_separator()
            dpg.add_input_text(tag="log_box", multiline=True, width=-1, height=-1, readonly=True)

    # --- Rebuilds ---

    def create_and_update_dynamic_ui(self):
        if not self._viewmodel.consume_layout_change():
            return
        for tag in ("widget_list_content", "dashboard_content", "settings_content"):
            if dpg.does_item_exist(tag):
                dpg.delete_item(tag, children_only=True)
        self._series_tags.clear()
        self._axis_tags.clear()
        self._resource_tags.clear()
        self._build_widget_list(parent="widget_list_content")
        self._build_dashboard_content(parent="dashboard_content")
        self._build_settings_content(parent="settings_content")

    def _build_widget_list(self, parent):
        for widget_id in self._viewmodel.widget_order:
            entry = self._viewmodel.widgets[widget_id]
            with dpg.group(horizontal=True, parent=parent):
                dpg.add_selectable(label=f"{entry.config.kind} {widget_id[-4:]}", width=150,
                                   default_value=widget_id == self._viewmodel.selected_widget_id,
                                   callback=lambda s, a, u: self._viewmodel.select_widget(u), user_data=widget_id)
                dpg.add_button(label="x", small=True, callback=lambda s, a, u: self._viewmodel.remove_widget(u), user_data=widget_id)

    def _build_dashboard_content(self, parent):
        for widget_id in self._viewmodel.widget_order:
            entry = self._viewmodel.widgets[widget_id]
            with dpg.collapsing_header(label=f"{entry.config.kind}: {widget_id}", default_open=True, parent=parent):
                if entry.config.kind == "chart":
                    self._build_chart(widget_id, entry)
                else:
                    dpg.add_group(tag=f"{widget_id}_resource")
                    self._resource_tags[widget_id] = f"{widget_id}_resource"
            entry.content.request_update()

    def _build_chart(self, widget_id, entry):
        model = entry.content.render()
        plot = dpg.add_plot(label="", height=260, width=-1)
        if model["show_legend"]:
            dpg.add_plot_legend(parent=plot)
        dpg.add_plot_axis(dpg.mvXAxis, label="Time (s)", parent=plot)
        axes = {"left": dpg.add_plot_axis(dpg.mvYAxis, label="Value", parent=plot)}
        if model["multi_axis"]:
            axes["right"] = dpg.add_plot_axis(dpg.mvYAxis, label="Right", parent=plot)
        self._axis_tags[widget_id] = axes
        self._series_tags[widget_id] = {}
        for series in model["series"]:
            tag = dpg.add_line_series([], [], label=series["label"], parent=axes[series["axis"]])
            self._series_tags[widget_id][series["ref"]] = tag

    def _build_settings_content(self, parent):
        entry = self._viewmodel.selected
        if entry is None:
            dpg.add_text("Select a widget to edit.", parent=parent)
            return
        if entry.config.kind == "chart":
            self._build_chart_settings(entry.settings, parent)
        else:
            self._build_resource_settings(entry.settings, parent)

    def _build_chart_settings(self, settings, parent):
        config = settings.config
        with dpg.collapsing_header(label="Attributes", default_open=True, parent=parent):
            dpg.add_input_text(default_value=format_refs(config.attribute_refs), hint="asset:attribute, ...",
                               width=-1, on_enter=True, callback=lambda s, a: settings.on_attributes_select(parse_refs(a)))
            for ref in config.attribute_refs:
                asset_name, attribute_name, side = settings.attribute_label(ref)
                with dpg.group(horizontal=True):
                    dpg.add_text(f"{asset_name} {attribute_name}" + (f" ({side})" if side else ""))
                    dpg.add_button(label="<>", small=True, callback=lambda s, a, u: settings.on_attribute_action(u), user_data=ref)

        with dpg.collapsing_header(label="Display", default_open=True, parent=parent):
            if settings.time_preset_options:
                dpg.add_combo(settings.time_preset_options, label="Timeframe", default_value=config.default_time_preset_key,
                              callback=lambda s, a: settings.on_time_preset_select(a))
            dpg.add_checkbox(label="Allow timerange select", default_value=not config.show_timestamp_controls,
                             callback=lambda s, a: settings.on_timestamp_controls_toggle(a))
            dpg.add_checkbox(label="Show legend", default_value=config.show_legend,
                             callback=lambda s, a: settings.on_show_legend_toggle(a))
            dpg.add_checkbox(label="Show grid", default_value=bool(config.show_grid),
                             callback=lambda s, a: settings.on_show_grid_toggle(a))
            if config.show_grid:
                for axis in ("x", "y"):
                    dpg.add_input_float(label=f"Grid {axis.upper()} intensity (0-1)", step=0.05,
                                        default_value=getattr(config, f"grid_{axis}_intensity"),
                                        callback=lambda s, a, u: settings.on_grid_intensity_change(u, a), user_data=axis)
                    dpg.add_input_float(label=f"Grid {axis.upper()} density", step=0.1,
                                        default_value=getattr(config, f"grid_{axis}_density"),
                                        callback=lambda s, a, u: settings.on_grid_density_change(u, a), user_data=axis)
                time_options = config.chart_options.get("scales", {}).get("x", {}).get("time", {})
                dpg.add_combo(X_AXIS_TIME_UNITS, label="X axis tick unit", default_value=time_options.get("unit", "second"),
                              callback=lambda s, a: settings.on_x_axis_unit_change(a))
                dpg.add_input_int(label="X axis step size", default_value=int(time_options.get("stepSize", 1) or 1),
                                  callback=lambda s, a: settings.on_x_axis_step_size_change(a))

        with dpg.collapsing_header(label="Axis configuration", default_open=True, parent=parent):
            for axis in settings.axis.visible_axes(config):
                if settings.is_multi_axis():
                    dpg.add_text("Left axis" if axis == "left" else "Right axis")
                for bound in ("max", "min"):
                    enabled, value = settings.bound_state(axis, bound)
                    with dpg.group(horizontal=True):
                        dpg.add_checkbox(default_value=enabled, user_data=(axis, bound),
                                         callback=lambda s, a, u: settings.on_min_max_value_toggle(u[0], u[1], a))
                        if enabled:
                            dpg.add_input_float(label=f"Y {bound}", default_value=float(value), width=150, user_data=(axis, bound),
                                                callback=lambda s, a, u: settings.on_min_max_value_change(u[0], u[1], a))
                        else:
                            dpg.add_input_text(label=f"Y {bound}", default_value="auto", width=150, enabled=False)

        with dpg.collapsing_header(label="Data sampling", default_open=True, parent=parent):
            dpg.add_combo(list(settings.sampling_options), label="Algorithm", default_value=settings.sampling_label() or "",
                          callback=lambda s, a: settings.on_sampling_query_change(a))
            if settings.formula_options():
                dpg.add_combo(INTERVAL_FORMULAS, label="Method", default_value=config.datapoint_query.formula,
                              callback=lambda s, a: settings.on_formula_change(a))

    def _build_resource_settings(self, settings, parent):
        config = settings.config
        with dpg.collapsing_header(label="Attributes", default_open=True, parent=parent):
            dpg.add_input_text(default_value=format_refs(config.attribute_refs), hint="asset:attribute, ...",
                               width=-1, on_enter=True, callback=lambda s, a: settings.on_attributes_select(parse_refs(a)))
        with dpg.collapsing_header(label="Marker coordinates", default_open=True, parent=parent):
            entries = settings.coordinate_entries()
            if not entries:
                dpg.add_text("No attribute connected")
            for index, asset_name, label, (x, y) in entries:
                dpg.add_text(f"{asset_name}" + (f" {label}" if label else ""))
                with dpg.group(horizontal=True):
                    dpg.add_input_float(width=90, default_value=float(x), min_value=0, max_value=100, user_data=index,
                                        callback=lambda s, a, u: settings.on_coordinate_update(u, "x", a))
                    dpg.add_input_float(width=90, default_value=float(y), min_value=0, max_value=100, user_data=index,
                                        callback=lambda s, a, u: settings.on_coordinate_update(u, "y", a))
        with dpg.collapsing_header(label="Resource", default_open=True, parent=parent):
            dpg.add_input_text(label="URL", default_value=config.resource_path, width=-60, on_enter=True,
                               callback=lambda s, a: settings.on_resource_path_update(a))
            override = [config.resource_url_attribute_ref] if config.resource_url_attribute_ref else []
            dpg.add_input_text(label="URL attribute", default_value=format_refs(override), hint="asset:attribute (optional)",
                               width=-60, on_enter=True,
                               callback=lambda s, a: settings.on_resource_url_attribute_select(parse_refs(a)[:1]))

    # --- Per-frame updates ---

    def update_widgets_data(self):
        for widget_id, entry in self._viewmodel.widgets.items():
            if not entry.content.needs_render:
                continue
            model = entry.content.render()
            if widget_id in self._series_tags:
                self._update_chart(widget_id, model)
            elif widget_id in self._resource_tags:
                self._update_resource(widget_id, model)

    def _update_chart(self, widget_id, model):
        start = min((s["timestamps"][0] for s in model["series"] if len(s["timestamps"])), default=0.0)
        for series in model["series"]:
            tag = self._series_tags[widget_id].get(series["ref"])
            if tag is None or not dpg.does_item_exist(tag):
                continue
            timestamps = np.asarray(series["timestamps"]) - start
            dpg.set_value(tag, [list(timestamps), list(series["values"])])
        for axis, (low, high) in model["bounds"].items():
            axis_tag = self._axis_tags[widget_id].get(axis)
            if axis_tag is None:
                continue
            axis_values = [v for s in model["series"] if s["axis"] == axis for v in s["values"]]
            limits = axis_limits(low, high, axis_values)
            if limits is not None:
                dpg.set_axis_limits(axis_tag, *limits)
            else:
                dpg.set_axis_limits_auto(axis_tag)
                dpg.fit_axis_data(axis_tag)

    def _update_resource(self, widget_id, model):
        group = self._resource_tags[widget_id]
        if not dpg.does_item_exist(group):
            return
        dpg.delete_item(group, children_only=True)
        if not model["url"]:
            dpg.add_text("No resource selected", parent=group)
            return
        dpg.add_text(model["url"], parent=group, wrap=0)
        for marker in model["markers"]:
            with dpg.group(horizontal=True, parent=group):
                dpg.add_text(f"({marker.left:.0f}%, {marker.top:.0f}%) {marker.asset_name or ''} {marker.label or ''}")
                if marker.swatch is not None:
                    dpg.add_color_button(default_value=parse_colour(marker.swatch), width=13, height=21)
                else:
                    dpg.add_text(marker.text or "")

    def update_log(self):
        log_text = "\n".join(self._viewmodel.log_messages)
        if dpg.does_item_exist("log_box"):
            dpg.set_value("log_box", log_text)
