"""
Tests for SidebarManager, bulk setup and user commands.
"""

import pytest
from sidebar import open_last_help, setup
from sidebar.config import SidebarConfig
from sidebar.errors import ConfigError, UnknownPanel
from sidebar.manager import SidebarManager


@pytest.fixture
def manager(host):
    """Manager with a left file tree, a left outline and a bottom terminal."""
    return setup(
        host,
        {
            "left_width": 0.25,
            "statusline": {"active_format": "[{text}]", "inactive_format": "{text}"},
            "close_tab_on_closing_last_buffer": True,
            "sidebars": {
                "files": {
                    "position": "left",
                    "filter": lambda win: host.filetype(win) == "files",
                    "open": lambda: host.new_window("files"),
                    "icon": "F",
                },
                "outline": {
                    "position": "left",
                    "filter": lambda win: host.filetype(win) == "outline",
                    "open": lambda: host.new_window("outline"),
                    "width": 20,
                    "icon": "O",
                },
                "terminal": {
                    "position": "bottom",
                    "filter": lambda win: host.filetype(win) == "terminal",
                    "open": lambda: host.new_window("terminal"),
                    "icon": "T",
                },
            },
        },
    )


@pytest.mark.unit
class TestSetup:
    """Test bulk setup."""

    def test_config_and_panels(self, manager):
        """Test options are merged and panels registered."""
        assert manager.config.left_width == 0.25
        assert manager.config.opts["signcolumn"] == "no"
        assert manager.list_panels() == ["files", "outline", "terminal"]
        assert manager.get("outline").size == 20
        assert len(manager.get()) == 3

    def test_list_form(self, host):
        """Test panels given as a list."""
        manager = setup(
            host,
            panels=[
                {"name": "qf", "position": "bottom", "filter": lambda w: False, "open": "copen"},
            ],
        )

        assert manager.list_panels() == ["qf"]
        assert manager.status is None

    def test_config_object(self, host, make_panel):
        """Test a SidebarConfig and PanelConfig objects are accepted."""
        manager = setup(host, SidebarConfig(move=False), [make_panel("A", "left")])

        assert manager.config.move is False
        assert manager.list_panels() == ["A"]

    def test_invalid_panel_fails_setup(self, host):
        """Test a malformed panel aborts setup."""
        with pytest.raises(ConfigError):
            setup(host, {"sidebars": [{"name": "a", "filter": lambda w: False, "open": "x"}]})

    def test_manager_defaults(self, host):
        """Test a manager without configuration."""
        manager = SidebarManager(host)

        assert manager.list_panels() == []
        assert manager.status is None
        assert host.on_window_shown is not None


@pytest.mark.unit
class TestControlSurface:
    """Test the public operations through the manager."""

    def test_switch_and_status(self, host, manager):
        """Test switching updates windows and the status indicator."""
        manager.open("files")
        (files,) = host.windows_of("files")
        assert host.windows[files]["width"] == 30  # 0.25 * 120
        assert manager.status.update_status() == "[F] O T"

        manager.switch("outline")
        assert host.windows_of("files") == []
        assert manager.is_panel(host.windows_of("outline")[0])
        assert manager.active_panel("left") == "outline"
        assert manager.status.update_status() == "F [O] T"

        manager.toggle("terminal")
        assert manager.status.update_status() == "F [O] [T]"

        manager.close_all()
        assert manager.status.update_status() == "F O T"

    def test_close_side_except(self, host, manager):
        """Test bulk closing through the manager."""
        manager.open("terminal")
        manager.open("files")

        manager.close_side_except("bottom", "terminal")
        assert manager.active_panel("bottom") == "terminal"

        manager.close_side("bottom")
        assert manager.active_panel("bottom") is None
        assert manager.active_panel("left") == "files"

    def test_get_current_panel(self, host, manager):
        """Test the panel owning the focused window is reported."""
        assert manager.get_current_panel() == (None, None)

        manager.open("files")
        window, panel = manager.get_current_panel()

        assert window == host.windows_of("files")[0]
        assert panel.name == "files"

    def test_unknown_panel(self, manager):
        """Test the manager surfaces UnknownPanel."""
        with pytest.raises(UnknownPanel):
            manager.toggle("nope")


@pytest.mark.unit
class TestHostBridge:
    """Test host events reaching the controller through the bus."""

    def test_window_shown_sets_up_panel(self, host, manager):
        """Test a panel window opened by its plugin gets laid out."""
        win = host.new_window("outline", focus=True)

        host.on_window_shown()

        assert host.windows[win]["width"] == 20
        assert host.windows[win]["mappings"]["q"] == "<C-w>q"
        assert manager.status.update_status() == "F [O] T"

    def test_window_shown_ignores_other_windows(self, host, manager):
        """Test regular windows are left alone."""
        win = host.new_window("python", focus=True)

        host.on_window_shown()

        assert host.windows[win]["mappings"] == {}

    def test_window_entered_closes_tab(self, host, manager):
        """Test entering a tab with only panels left closes it."""
        host.on_window_entered()
        assert not host.quit_called

        manager.register(
            {"name": "main", "position": "right", "filter": lambda w: host.filetype(w) == "main", "open": "x"}
        )
        host.on_window_entered()
        assert host.quit_called

    def test_window_entered_respects_option(self, host, make_panel):
        """Test the tab is kept when the option is off."""
        manager = setup(host, panels=[make_panel("main", "left")])

        host.on_window_entered()

        assert not host.quit_called
        assert manager.list_panels() == ["main"]



def panel_on(host, name, position="left"):
    """Mapping form of a panel whose windows have filetype ``name``."""
    return {
        "position": position,
        "filter": lambda win: host.filetype(win) == name,
        "open": lambda: host.new_window(name),
    }


@pytest.mark.unit
class TestIndependentManagers:
    """Test managers on different hosts do not share events."""

    def test_commands_reach_only_their_manager(self, host, other_host):
        """Test a command runs against the manager it was given to."""
        setup(host, panels={"files": panel_on(host, "files")})
        second = setup(
            other_host,
            panels={
                "files": panel_on(other_host, "files"),
                "outline": panel_on(other_host, "outline"),
            },
        )

        assert second.run_command("Sidebar outline") == {"success": True}
        assert other_host.windows_of("outline")

        assert second.run_command("Sidebar files") == {"success": True}
        assert len(other_host.windows_of("files")) == 1
        assert host.windows_of("files") == []

    def test_host_events_reach_only_their_manager(self, host, other_host):
        """Test one host's window events leave the other host alone."""
        setup(
            host,
            {
                "close_tab_on_closing_last_buffer": True,
                "sidebars": {"main": panel_on(host, "main", "right")},
            },
        )
        setup(other_host, {"close_tab_on_closing_last_buffer": True})

        other_host.on_window_entered()
        assert not host.quit_called
        assert not other_host.quit_called

        host.on_window_entered()
        assert host.quit_called

    def test_status_follows_own_manager(self, host, other_host):
        """Test settle notifications do not cross managers."""
        first = setup(
            host,
            {
                "statusline": {"active_format": "[{text}]", "inactive_format": "{text}"},
                "sidebars": {"files": dict(panel_on(host, "files"), icon="F")},
            },
        )
        second = setup(other_host, panels={"files": panel_on(other_host, "files")})

        second.open("files")

        assert first.status.update_status() == ""
        assert first.status.render() == "F"

@pytest.mark.unit
class TestCommands:
    """Test user commands."""

    def test_toggle_command(self, host, manager):
        """Test commands reach the controller."""
        assert manager.run_command("SidebarToggle terminal") == {"success": True}
        assert host.windows_of("terminal")

        assert manager.run_command("SidebarToggle terminal") == {"success": True}
        assert host.windows_of("terminal") == []

    def test_open_switch_close_commands(self, host, manager):
        """Test the remaining single-panel commands."""
        manager.run_command("Sidebar files")
        manager.run_command("SidebarSwitch outline")
        assert host.windows_of("files") == []

        manager.run_command("SidebarOpen terminal")
        manager.run_command("SidebarClose outline")
        assert host.windows_of("outline") == []

        manager.run_command("SidebarCloseSide bottom")
        assert host.windows_of("terminal") == []

    def test_close_all_command(self, host, manager):
        """Test the command without argument."""
        manager.open("files")
        manager.open("terminal")

        assert manager.run_command("SidebarCloseAll") == {"success": True}
        assert manager.active_panel("left") is None
        assert manager.active_panel("bottom") is None

    def test_command_errors(self, manager):
        """Test errors are reported as results."""
        assert manager.run_command("SidebarToggle nope") == {
            "success": False,
            "error": "Unknown sidebar: nope",
        }
        assert manager.run_command("SidebarCloseSide middle")["success"] is False
        assert manager.run_command("SidebarToggle")["success"] is False
        assert manager.run_command("Bogus")["success"] is False
        assert manager.run_command("")["success"] is False

    def test_completion(self, manager):
        """Test panel and edge completion."""
        assert manager.commands.complete("SidebarToggle", "") == ["files", "outline", "terminal"]
        assert manager.commands.complete("Sidebar", "o") == ["outline"]
        assert manager.commands.complete("SidebarCloseSide", "b") == ["bottom"]
        assert manager.commands.complete("SidebarCloseAll", "") == []
        assert manager.commands.complete("Nope", "") == []


@pytest.mark.unit
class TestOpenLastHelp:
    """Test the help panel helper."""

    def test_reuses_last_used_help_buffer(self, host, help_buffers):
        """Test the most recently used help buffer is shown."""
        host.buffers = help_buffers

        open_last_help(host, "vertical split")

        assert host.commands_run == ["vertical split help", "buffer 9"]

    def test_without_help_buffers(self, host):
        """Test only the split is opened when no help was read yet."""
        open_last_help(host, "split")

        assert host.commands_run == ["split help"]
