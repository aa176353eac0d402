"""
Sidebar Errors

Exception types raised by the panel registry and controller.
"""


class SidebarError(Exception):
    """Base class for sidebar errors."""


class ConfigError(SidebarError, ValueError):
    """Raised when a panel or global configuration is malformed."""


class UnknownPanel(SidebarError, LookupError):
    """Raised when an operation references a panel that is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown sidebar: {name}")
        self.name = name


class CloseTimeout(SidebarError):
    """Raised when closed panels are still visible after the close timeout."""

    def __init__(self, edge, names, timeout: float):
        joined = ", ".join(sorted(names))
        super().__init__(
            f"Sidebar(s) {joined} at {edge} still open after {timeout:.2f}s"
        )
        self.edge = edge
        self.names = set(names)
        self.timeout = timeout
