"""
Host Windowing Interface

The sidebar core never talks to an editor directly. Everything it needs
from the windowing host goes through the Host interface below; window
handles are opaque hashable values owned by the host.
"""

from __future__ import annotations
import contextlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol import Edge


@dataclass
class BufferInfo:
    """Content object known to the host."""

    number: int
    buftype: str = ""
    lastused: int = 0


class Host(ABC):
    """Abstract windowing host.

    Implementations call ``on_window_shown`` when a buffer is displayed in
    a window and ``on_window_entered`` when focus enters a window. Both
    should be invoked from the host's scheduler, not from inside the event
    that triggered them.
    """

    def __init__(self):
        self.on_window_shown: Optional[Callable[[], None]] = None
        self.on_window_entered: Optional[Callable[[], None]] = None

    # Windows and buffers
    @abstractmethod
    def list_windows(self) -> List[Any]:
        """Windows of the current view, in host order."""

    @abstractmethod
    def list_buffers(self) -> List[BufferInfo]:
        """All content objects known to the host."""

    @abstractmethod
    def is_window_valid(self, window) -> bool:
        """Whether the handle still refers to an open window."""

    # Focus
    @abstractmethod
    def current_window(self):
        """The focused window."""

    @abstractmethod
    def set_current_window(self, window):
        """Focus a window."""

    @abstractmethod
    def focus_previous(self):
        """Move focus to the previously focused window."""

    # Geometry
    @property
    @abstractmethod
    def columns(self) -> int:
        """Total width of the editing surface in cells."""

    @property
    @abstractmethod
    def lines(self) -> int:
        """Total height of the editing surface in cells."""

    @abstractmethod
    def set_width(self, window, width: int):
        """Set a window's width."""

    @abstractmethod
    def set_height(self, window, height: int):
        """Set a window's height."""

    @abstractmethod
    def move_to_edge(self, window, edge: "Edge"):
        """Move a window so it spans the full extent of an edge."""

    @abstractmethod
    def close_window(self, window):
        """Close a window."""

    # Options and mappings
    @abstractmethod
    def set_window_option(self, window, name: str, value):
        """Set a window-scoped option. May raise for unknown options."""

    @abstractmethod
    def set_buffer_option(self, window, name: str, value):
        """Set an option on the window's buffer. May raise for unknown options."""

    @abstractmethod
    def has_mapping(self, window, lhs: str) -> bool:
        """Whether the window's buffer maps a key."""

    @abstractmethod
    def set_mapping(self, window, lhs: str, rhs: str):
        """Map a key on the window's buffer."""

    # Viewports
    @property
    @abstractmethod
    def stable_split(self) -> bool:
        """Whether viewports stay put when windows are split or closed."""

    @abstractmethod
    def save_view(self, window):
        """Capture a window's cursor and scroll position."""

    @abstractmethod
    def restore_view(self, window, view):
        """Restore a view captured with save_view."""

    # Commands
    @abstractmethod
    def run_command(self, command: str):
        """Execute a host command string."""

    @abstractmethod
    def evaluate(self, expression: str):
        """Evaluate a host expression and return its value."""

    @abstractmethod
    def pause(self, seconds: float):
        """Yield to the host event loop for about ``seconds``."""

    # Tabs
    @abstractmethod
    def tab_count(self) -> int:
        """Number of tabs (views)."""

    @abstractmethod
    def close_tab(self):
        """Close the current tab, asking for confirmation if needed."""

    @abstractmethod
    def quit_all(self):
        """Quit the host, asking for confirmation if needed."""

    def hold_redraw(self):
        """Context manager suppressing redraws while layout is applied."""
        return contextlib.nullcontext()
