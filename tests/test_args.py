"""
Tests for command line parsing and validation.
"""
from pathlib import Path

import pytest

from xmltv2vdr.args import ArgumentParser, ArgumentValidator, PathManager


class TestParseHost:
    """Test suite for --host values."""

    @pytest.mark.parametrize("value,expected", [
        (None, (None, None)),
        ("vdr", ("vdr", None)),
        ("vdr.local:6419", ("vdr.local", 6419)),
        ("192.168.1.10:2001", ("192.168.1.10", 2001)),
        ("[::1]:6419", ("::1", 6419)),
        ("[fe80::1]", ("fe80::1", None)),
    ])
    def test_valid(self, value, expected):
        assert ArgumentValidator.parse_host(value) == expected

    @pytest.mark.parametrize("value", ["", "vdr:", "vdr:0", "vdr:65536", "vdr:port", "a b:1"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            ArgumentValidator.parse_host(value)


class TestArgumentParser:
    """Test suite for the xmltv2vdr command line."""

    def test_defaults(self):
        args = ArgumentParser().parse_args(["epg-load"])
        assert args.command == "epg-load"
        assert args.vdrhost is None
        assert args.vdrport is None
        assert args.channels_conf is None
        assert args.xmltv is None
        assert not args.console

    def test_all_options(self, sample_channels_file, sample_xmltv_file, tmp_path):
        args = ArgumentParser().parse_args([
            "epg-load",
            "-H", "vdr.local:2001",
            "-c", str(sample_channels_file),
            "-x", str(sample_xmltv_file),
            "--basedir", str(tmp_path),
            "--debug",
            "--console",
        ])
        assert args.vdrhost == "vdr.local"
        assert args.vdrport == 2001
        assert args.channels_conf == sample_channels_file
        assert args.xmltv == str(sample_xmltv_file)
        assert args.basedir == tmp_path

    def test_url_source_not_checked(self):
        args = ArgumentParser().parse_args(["epg-load", "-x", "https://example.com/guide.xml.gz"])
        assert args.xmltv == "https://example.com/guide.xml.gz"

    def test_verbose_alias(self):
        args = ArgumentParser().parse_args(["epg-load", "-v"])
        assert args.console

    def test_missing_channels_file(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            ArgumentParser().parse_args(["epg-load", "-c", str(tmp_path / "nope.conf")])
        assert excinfo.value.code == 2

    def test_bad_host(self):
        with pytest.raises(SystemExit):
            ArgumentParser().parse_args(["epg-load", "--host", "vdr:99999"])

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            ArgumentParser().parse_args(["epg-dump"])

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            ArgumentParser().parse_args([])

    def test_console_and_quiet_exclusive(self):
        with pytest.raises(SystemExit):
            ArgumentParser().parse_args(["epg-load", "--console", "--quiet"])

    def test_version(self, capsys):
        from xmltv2vdr import __version__

        with pytest.raises(SystemExit) as excinfo:
            ArgumentParser().parse_args(["--version"])
        assert excinfo.value.code == 0
        assert capsys.readouterr().out.strip() == __version__

    @pytest.mark.parametrize("argv,expected", [
        (["epg-load"], {"level": "default", "console": False, "quiet": False}),
        (["epg-load", "--debug", "--console"], {"level": "debug", "console": True, "quiet": False}),
        (["epg-load", "--warning", "--quiet"], {"level": "warning", "console": False, "quiet": True}),
    ])
    def test_logging_config(self, argv, expected):
        parser = ArgumentParser()
        assert parser.get_logging_config(parser.parse_args(argv)) == expected


class TestPathManager:
    """Test suite for default paths."""

    def test_basedir_override(self, tmp_path):
        defaults = PathManager.get_system_defaults(tmp_path)
        assert defaults["config_file"] == tmp_path / "conf" / "xmltv2vdr.xml"
        assert defaults["log_file"] == tmp_path / "log" / "xmltv2vdr.log"

    def test_home_default(self):
        defaults = PathManager.get_system_defaults()
        assert defaults["base_dir"] == Path.home() / "xmltv2vdr"

    def test_create_directories(self, tmp_path):
        defaults = PathManager.get_system_defaults(tmp_path / "base")
        PathManager.create_directories(defaults)
        assert defaults["conf_dir"].is_dir()
        assert defaults["log_dir"].is_dir()
