"""
Unit tests for config.paths module.
"""
import os
import sys
import unittest
from pathlib import Path, PurePosixPath, PureWindowsPath

# Add src to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../../src')))

from snapkeep.config.paths import (
    user_config_dir,
    global_config_dir,
    config_dirs,
    profile_filename,
    candidate_paths,
)


class TestUserConfigDir(unittest.TestCase):
    """Test user_config_dir function."""

    def test_linux_uses_xdg_config_home(self):
        """Test that an absolute XDG_CONFIG_HOME is used on Linux."""
        env = {"HOME": "/home/alice", "XDG_CONFIG_HOME": "/srv/conf"}
        result = user_config_dir("snapkeep", "linux", env)
        self.assertEqual(result, PurePosixPath("/srv/conf/snapkeep"))

    def test_linux_ignores_relative_xdg_config_home(self):
        """Test that a relative XDG_CONFIG_HOME falls back to ~/.config."""
        env = {"HOME": "/home/alice", "XDG_CONFIG_HOME": "conf"}
        result = user_config_dir("snapkeep", "linux", env)
        self.assertEqual(result, PurePosixPath("/home/alice/.config/snapkeep"))

    def test_linux_defaults_to_dot_config(self):
        """Test the default Linux location."""
        result = user_config_dir("snapkeep", "linux", {"HOME": "/home/alice"})
        self.assertEqual(result, PurePosixPath("/home/alice/.config/snapkeep"))

    def test_returns_none_without_home(self):
        """Test that None is returned when the home directory is unknown."""
        self.assertIsNone(user_config_dir("snapkeep", "linux", {}))
        self.assertIsNone(user_config_dir("snapkeep", "darwin", {}))

    def test_macos_uses_application_support(self):
        """Test the macOS location."""
        result = user_config_dir("snapkeep", "darwin", {"HOME": "/Users/alice"})
        self.assertEqual(
            result,
            PurePosixPath("/Users/alice/Library/Application Support/snapkeep"),
        )

    def test_windows_uses_appdata(self):
        """Test the Windows location is derived from APPDATA."""
        env = {"APPDATA": r"C:\Users\alice\AppData\Roaming"}
        result = user_config_dir("snapkeep", "win32", env)
        self.assertEqual(
            result,
            PureWindowsPath(r"C:\Users\alice\AppData\Roaming\snapkeep\config"),
        )

    def test_windows_without_appdata(self):
        """Test that None is returned when APPDATA is not set."""
        self.assertIsNone(user_config_dir("snapkeep", "win32", {}))

    def test_sandboxed_platforms_have_none(self):
        """Test that sandboxed targets have no user config dir."""
        for platform in ("ios", "emscripten", "wasi"):
            with self.subTest(platform=platform):
                self.assertIsNone(user_config_dir("snapkeep", platform, {"HOME": "/home/a"}))


class TestGlobalConfigDir(unittest.TestCase):
    """Test global_config_dir function."""

    def test_unix_uses_etc(self):
        """Test that Unix-like systems use /etc/<app>."""
        for platform in ("linux", "darwin", "freebsd13"):
            with self.subTest(platform=platform):
                self.assertEqual(
                    global_config_dir("snapkeep", platform, {}),
                    PurePosixPath("/etc/snapkeep"),
                )

    def test_windows_uses_programdata(self):
        """Test that Windows uses PROGRAMDATA."""
        result = global_config_dir("snapkeep", "win32", {"PROGRAMDATA": r"C:\ProgramData"})
        self.assertEqual(result, PureWindowsPath(r"C:\ProgramData\snapkeep\config"))

    def test_windows_without_programdata(self):
        """Test that None is returned when PROGRAMDATA is not set."""
        self.assertIsNone(global_config_dir("snapkeep", "win32", {}))

    def test_sandboxed_platforms_have_none(self):
        """Test that sandboxed targets have no global config dir."""
        self.assertIsNone(global_config_dir("snapkeep", "emscripten", {}))
        self.assertIsNone(global_config_dir("snapkeep", "ios", {}))


class TestConfigDirs(unittest.TestCase):
    """Test config_dirs function."""

    def test_order_is_user_global_working_dir(self):
        """Test the lookup order."""
        result = config_dirs(
            "snapkeep", "linux", {"HOME": "/home/alice"}, PurePosixPath("/work")
        )
        self.assertEqual(result, [
            PurePosixPath("/home/alice/.config/snapkeep"),
            PurePosixPath("/etc/snapkeep"),
            PurePosixPath("/work"),
        ])

    def test_undeterminable_dirs_are_omitted(self):
        """Test that missing sources are dropped instead of failing."""
        result = config_dirs("snapkeep", "wasi", {}, PurePosixPath("/work"))
        self.assertEqual(result, [PurePosixPath("/work")])

    def test_defaults_to_cwd(self):
        """Test that the current directory is used when none is given."""
        result = config_dirs("snapkeep", "linux", {})
        self.assertEqual(result[-1], Path.cwd())


class TestCandidatePaths(unittest.TestCase):
    """Test candidate_paths and profile_filename functions."""

    def test_profile_filename(self):
        """Test that profiles use the toml extension."""
        self.assertEqual(profile_filename("daily"), "daily.toml")

    def test_joins_filename_to_every_dir(self):
        """Test that the filename is appended to each directory."""
        env = {"APPDATA": r"C:\Users\a\AppData\Roaming", "PROGRAMDATA": r"C:\ProgramData"}
        result = candidate_paths(
            "daily.toml", "snapkeep", "win32", env, PureWindowsPath(r"D:\work")
        )
        self.assertEqual(result, [
            PureWindowsPath(r"C:\Users\a\AppData\Roaming\snapkeep\config\daily.toml"),
            PureWindowsPath(r"C:\ProgramData\snapkeep\config\daily.toml"),
            PureWindowsPath(r"D:\work\daily.toml"),
        ])

    def test_no_io_performed(self):
        """Test that paths are returned even if nothing exists."""
        result = candidate_paths(
            "x.toml", "snapkeep", "linux", {"HOME": "/nonexistent"}, PurePosixPath("/nowhere")
        )
        self.assertEqual(len(result), 3)


if __name__ == "__main__":
    unittest.main()
