"""
Tests for the XML settings file.
"""
import xml.etree.ElementTree as ET

import pytest

from xmltv2vdr.config import ConfigManager


def write_config(path, settings):
    lines = ['<?xml version="1.0" encoding="utf-8"?>', '<settings version="1">']
    lines += [f'  <setting id="{key}">{value}</setting>' for key, value in settings.items()]
    lines.append("</settings>")
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


class TestConfigManager:
    """Test suite for configuration loading."""

    def test_default_config_created(self, tmp_path):
        config_file = tmp_path / "conf" / "xmltv2vdr.xml"
        settings = ConfigManager(config_file).load_config()

        assert config_file.exists()
        assert settings["vdrhost"] == "127.0.0.1"
        assert settings["vdrport"] == 6419
        assert settings["encoding"] == "utf-8"
        assert settings["channels"] == "/var/lib/vdr/channels.conf"
        assert settings["xmltv"] == "/var/lib/vdr/xmltv-epg.xml"

    def test_file_values(self, tmp_path):
        config_file = write_config(tmp_path / "c.xml", {
            "vdrhost": "vdr.local",
            "vdrport": "2001",
            "channels": "/etc/vdr/channels.conf",
        })
        manager = ConfigManager(config_file)
        settings = manager.load_config()

        assert settings["vdrhost"] == "vdr.local"
        assert settings["vdrport"] == 2001
        assert settings["channels"] == "/etc/vdr/channels.conf"
        assert manager.get_vdr_address() == ("vdr.local", 2001)

    def test_value_attribute(self, tmp_path):
        config_file = tmp_path / "c.xml"
        config_file.write_text(
            '<settings version="1"><setting id="vdrhost" value="10.0.0.2"/></settings>'
        )
        assert ConfigManager(config_file).load_config()["vdrhost"] == "10.0.0.2"

    def test_unknown_and_invalid_settings_ignored(self, tmp_path):
        config_file = write_config(tmp_path / "c.xml", {"zipcode": "92101", "vdrport": "abc"})
        settings = ConfigManager(config_file).load_config()

        assert "zipcode" not in settings
        assert settings["vdrport"] == 6419

    def test_command_line_overrides(self, tmp_path):
        config_file = write_config(tmp_path / "c.xml", {"vdrhost": "vdr.local"})
        manager = ConfigManager(config_file)
        settings = manager.load_config(vdrhost="other", vdrport=2001, xmltv="/tmp/g.xml")

        assert settings["vdrhost"] == "other"
        assert settings["vdrport"] == 2001
        assert settings["xmltv"] == "/tmp/g.xml"
        assert "vdrhost" in manager.config_changes
        assert "channels" not in manager.config_changes

    def test_broken_file_raises(self, tmp_path):
        config_file = tmp_path / "c.xml"
        config_file.write_text("<settings><setting id=")
        with pytest.raises(ET.ParseError):
            ConfigManager(config_file).load_config()


class TestRetentionConfig:
    """Test suite for log retention settings."""

    @pytest.mark.parametrize("logrotate,relogs,enabled,interval,days,keep", [
        ("true", "30", True, "daily", 30, 30),
        ("weekly", "monthly", True, "weekly", 30, 4),
        ("monthly", "quarterly", True, "monthly", 90, 3),
        ("false", "weekly", False, "daily", 7, 7),
        ("true", "unlimited", True, "daily", 0, 0),
        ("true", "forever", True, "daily", 30, 30),
    ])
    def test_retention(self, tmp_path, logrotate, relogs, enabled, interval, days, keep):
        config_file = write_config(tmp_path / "c.xml", {"logrotate": logrotate, "relogs": relogs})
        manager = ConfigManager(config_file)
        manager.load_config()
        retention = manager.get_retention_config()

        assert retention["enabled"] is enabled
        assert retention["interval"] == interval
        assert retention["log_retention_days"] == days
        assert retention["keep_files"] == keep
