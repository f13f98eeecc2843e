# views/main_view.py
from ui_manager import UIManager


class MainView:
    """Dashboard window. Drawing is delegated to UIManager; state lives in the viewmodel."""

    def __init__(self, viewmodel):
        self.viewmodel = viewmodel
        self.ui_manager = UIManager(viewmodel)

    def create_window(self):
        # Static frame only; widget panels are built on the first update.
        self.ui_manager.create_all_ui_panels()

    def update(self):
        """Rebuilds panels if the widget set or a config changed, then pushes live data."""
        self.ui_manager.create_and_update_dynamic_ui()
        self.ui_manager.update_widgets_data()
        self.ui_manager.update_log()
