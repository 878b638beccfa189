"""
Main argument parser module for xmltv2vdr

Orchestrates argument parsing, validation and special actions handling.
"""

import argparse
import sys
from pathlib import Path

from .path_manager import PathManager
from .validator import ArgumentValidator


class ArgumentParser:
    """Command line argument parser for xmltv2vdr"""

    COMMANDS = ("epg-load",)

    def __init__(self):
        self.parser = self._create_parser()
        self.validator = ArgumentValidator()
        self.path_manager = PathManager()

    def _create_parser(self):
        """Create the argument parser with all options"""
        parser = argparse.ArgumentParser(
            prog="xmltv2vdr",
            description="Load XMLTV program guide data into VDR's EPG over SVDRP",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_epilog_text(),
        )

        parser.add_argument(
            "command", nargs="?", choices=self.COMMANDS,
            help="Action to perform (epg-load)",
        )

        parser.add_argument(
            "--version", action="store_true",
            help="Show version and exit",
        )

        # VDR connection and inputs
        parser.add_argument(
            "--host", "-H", type=str, metavar="HOST[:PORT]",
            help="VDR SVDRP host and port (default: 127.0.0.1:6419)",
        )

        parser.add_argument(
            "--vdr-channels-conf", "-c", dest="channels_conf", type=Path, metavar="PATH",
            help="VDR's channels.conf (default: /var/lib/vdr/channels.conf)",
        )

        parser.add_argument(
            "--xmltv-epg-data", "-x", dest="xmltv", type=str, metavar="PATH|URL",
            help="XMLTV EPG data, file, .gz file or http(s) URL "
            "(default: /var/lib/vdr/xmltv-epg.xml)",
        )

        # Log level selection
        level_group = parser.add_mutually_exclusive_group()
        level_group.add_argument(
            "--warning", "-w", action="store_true",
            help="Only warnings and errors to file",
        )

        level_group.add_argument(
            "--debug", "-d", action="store_true",
            help="All debug information to file, including SVDRP traffic (very verbose)",
        )

        # Console output control
        console_group = parser.add_mutually_exclusive_group()
        console_group.add_argument(
            "--console", "--verbose", "-v",
            dest="console",
            action="store_true",
            help="Display active log level to console (can combine with --warning/--debug)",
        )

        console_group.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="No console output, logs to file only",
        )

        # Configuration
        parser.add_argument(
            "--config-file", type=Path,
            help="Configuration file path",
        )

        parser.add_argument(
            "--basedir", type=Path,
            help="Base directory for config and logs (default: ~/xmltv2vdr)",
        )

        return parser

    def _get_epilog_text(self):
        """Get the epilog help text"""
        return """
Examples:
  xmltv2vdr epg-load
  xmltv2vdr epg-load --host vdr.local:6419 --console
  xmltv2vdr epg-load -c /etc/vdr/channels.conf -x /tmp/guide.xml --debug --console
  xmltv2vdr epg-load -x https://example.com/guide.xml.gz

Channel matching:
  Each XMLTV <channel> is matched against channels.conf by its display names.
  The second comma separated name of a channels.conf entry is the call sign,
  e.g. "ABC,WCVB:509028:M10:A:0:49=2:0:0:0:3:0:0:0" matches display name WCVB.

Configuration:
  Default config: ~/xmltv2vdr/conf/xmltv2vdr.xml
  Default logs:   ~/xmltv2vdr/log/

Logging Levels:
  (default)       Info, warnings and errors to file only
  --warning       Only warnings and errors to file
  --debug         All debug information to file
  --console       Display active log level to console (can combine with --warning/--debug)
  --quiet         No console output, logs to file only
        """

    def parse_args(self, args=None):
        """Parse command line arguments with validation"""
        args = self.parser.parse_args(args)

        # Handle special actions that exit immediately
        if self._handle_special_actions(args):
            sys.exit(0)

        if args.command is None:
            self.parser.error("command: no command specified")

        self._validate_args(args)
        self._normalize_options(args)

        return args

    def _handle_special_actions(self, args) -> bool:
        """Handle special actions that exit immediately"""
        if args.version:
            from .. import __version__

            print(__version__)
            return True

        return False

    def _validate_args(self, args):
        """Validate argument values"""
        errors = self.validator.validate_all_arguments(args)
        for error in errors:
            self.parser.error(error)

    def _normalize_options(self, args):
        """Split --host into vdrhost/vdrport"""
        args.vdrhost, args.vdrport = self.validator.parse_host(args.host)
        del args.host

    def get_logging_config(self, args):
        """Determine logging configuration from arguments"""
        config = {
            "level": "default",
            "console": False,
            "quiet": False,
        }

        if args.debug:
            config["level"] = "debug"
        elif args.warning:
            config["level"] = "warning"

        if args.console:
            config["console"] = True
        elif args.quiet:
            config["quiet"] = True

        return config

    def get_system_defaults(self, basedir: Path = None):
        """Get default directories"""
        return self.path_manager.get_system_defaults(basedir)

    def create_directories_with_proper_permissions(self, defaults):
        """Create required directories with proper permissions"""
        self.path_manager.create_directories(defaults)
