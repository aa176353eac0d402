"""
Help Panel Helper

Open action for a help panel that comes back to the last help page read.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .host import Host


def open_last_help(host: "Host", split_command: str = "vertical split"):
    """Open help in a new split, showing the most recently used help buffer.

    Args:
        host: Windowing host
        split_command: Host command prefix creating the split
    """
    best = None
    for buf in host.list_buffers():
        if buf.buftype != "help":
            continue
        if best is None or (buf.lastused, buf.number) > (best.lastused, best.number):
            best = buf

    host.run_command(f"{split_command} help")
    if best is not None:
        host.run_command(f"buffer {best.number}")
