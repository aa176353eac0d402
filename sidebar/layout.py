"""
Panel Layout

Sizing, placement, options and viewport preservation for panel windows.
"""

from __future__ import annotations
import contextlib
import logging
import math
from typing import TYPE_CHECKING, Any, Dict

from .config import merge_options

if TYPE_CHECKING:
    from .config import PanelConfig, SidebarConfig
    from .host import Host

logger = logging.getLogger(__name__)


class LayoutEngine:
    """Applies configured geometry and options to panel windows.

    Responsibilities:
    - Resolve absolute and proportional sizes
    - Move panel windows to their edge
    - Apply merged window/buffer options (best effort, per key)
    - Install the close key on panel buffers
    - Save and restore viewports around layout changes
    """

    def __init__(self, config: "SidebarConfig", host: "Host"):
        """Initialize layout engine.

        Args:
            config: Global sidebar configuration
            host: Windowing host to apply layout through
        """
        self.config = config
        self.host = host

    def compute_size(self, panel: "PanelConfig", total_cells: int) -> int:
        """Resolve a panel's size in cells.

        Sizes of 1 or more are absolute cell counts, smaller sizes are a
        fraction of ``total_cells``. The result is never below 1.
        """
        size = panel.size
        if size is None:
            size = self.config.default_size(panel.edge)

        if size >= 1:
            cells = int(size)
        else:
            cells = math.floor(size * total_cells)
        return max(1, cells)

    def should_move(self, panel: "PanelConfig") -> bool:
        """Whether a panel is moved to its edge (panel setting wins)."""
        if panel.move is not None:
            return panel.move
        return self.config.move

    def reposition(self, panel: "PanelConfig", window):
        """Move a window to span its panel's edge, keeping focus where it was."""
        if not self.should_move(panel):
            return

        previous = self.host.current_window()
        self.host.move_to_edge(window, panel.edge)

        if self.host.is_window_valid(previous):
            self.host.set_current_window(previous)

    def resize(self, panel: "PanelConfig", window):
        """Set the width (left/right) or height (top/bottom) of a panel window."""
        if panel.edge.is_vertical:
            self.host.set_width(window, self.compute_size(panel, self.host.columns))
        else:
            self.host.set_height(window, self.compute_size(panel, self.host.lines))

    def merged_options(self, panel: "PanelConfig") -> Dict[str, Any]:
        """Global default options overlaid with the panel's own."""
        return merge_options(self.config.opts, panel.options)

    def apply_options(self, panel: "PanelConfig", window):
        """Apply options to the window and to its buffer.

        Each option is tried on both targets; an option a target does not
        know is skipped.
        """
        for name, value in self.merged_options(panel).items():
            try:
                self.host.set_window_option(window, name, value)
            except Exception as e:
                logger.debug("Window option %s skipped for %s: %s", name, panel.name, e)
            try:
                self.host.set_buffer_option(window, name, value)
            except Exception as e:
                logger.debug("Buffer option %s skipped for %s: %s", name, panel.name, e)

    def ensure_close_mapping(self, window):
        """Map the close key on the window's buffer unless already mapped."""
        key = self.config.close_key
        if not key or self.host.has_mapping(window, key):
            return
        self.host.set_mapping(window, key, self.config.close_key_action)

    def setup_window(self, panel: "PanelConfig", window):
        """Bring a panel window in line with its configuration."""
        with self.host.hold_redraw():
            self.reposition(panel, window)
            self.resize(panel, window)
            self.apply_options(panel, window)
            self.ensure_close_mapping(window)

    # Viewport preservation
    def snapshot_views(self) -> Dict[Any, Any]:
        """Capture the view of every window in the current view.

        Returns an empty snapshot when the host keeps viewports stable.
        """
        if self.host.stable_split:
            return {}
        return {
            window: self.host.save_view(window)
            for window in self.host.list_windows()
        }

    def restore_views(self, snapshot: Dict[Any, Any]):
        """Restore views captured by snapshot_views, skipping closed windows."""
        if not snapshot:
            return

        current = self.host.current_window()
        for window, view in snapshot.items():
            if self.host.is_window_valid(window):
                self.host.restore_view(window, view)

        if self.host.is_window_valid(current):
            self.host.set_current_window(current)

    @contextlib.contextmanager
    def preserved_views(self, enabled: bool = True):
        """Keep viewports in place across the body of the with-block."""
        snapshot = self.snapshot_views() if enabled else {}
        try:
            yield snapshot
        finally:
            self.restore_views(snapshot)
