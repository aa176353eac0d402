"""
Event Topics for the sidebar manager

All pub/sub topics are defined here for easy discovery and documentation.
Topic naming convention: <category>.<action>

Every topic is always published with the same keyword arguments, since
Pypubsub infers a topic's message data specification from first use.
"""

# Settle notifications
EDGE_SETTLED = "edge.settled"
"""Published when an operation settles. Params: edge (str), panel (name or None)"""

# Panel lifecycle events
PANEL_OPENED = "panel.opened"
"""Published after a panel's open action ran. Params: name, edge"""

PANEL_CLOSED = "panel.closed"
"""Published once a closed panel's window is gone. Params: name, edge"""

PANEL_SETUP = "panel.setup"
"""Published after layout was applied to a panel window. Params: name, edge"""

# Host bridge events (published by SidebarManager from host callbacks)
HOST_WINDOW_SHOWN = "host.window_shown"
"""Published when the host displays a buffer in a window."""

HOST_WINDOW_ENTERED = "host.window_entered"
"""Published when focus enters a window."""

# Command events (imperative - tell the controller to do something)
CMD_OPEN = "cmd.open"
"""Command: Open a panel. Params: name"""

CMD_SWITCH = "cmd.switch"
"""Command: Switch to a panel. Params: name"""

CMD_TOGGLE = "cmd.toggle"
"""Command: Toggle a panel. Params: name"""

CMD_CLOSE = "cmd.close"
"""Command: Close a panel. Params: name"""

CMD_CLOSE_SIDE = "cmd.close_side"
"""Command: Close every panel at an edge. Params: edge"""

CMD_CLOSE_SIDE_EXCEPT = "cmd.close_side_except"
"""Command: Close every panel at an edge but one. Params: edge, name"""

CMD_CLOSE_ALL = "cmd.close_all"
"""Command: Close every panel."""
