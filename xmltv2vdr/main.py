#!/usr/bin/env python3
"""
xmltv2vdr - XMLTV to VDR EPG loader

Reads an XMLTV guide and loads it into a running VDR over SVDRP.
"""

import logging
import sys
import time
import xml.etree.ElementTree as ET
from pathlib import Path

from .args import ArgumentParser
from .channels import load_channels_conf
from .config import ConfigManager
from .errors import Xmltv2VdrError
from .logrotate import LogRotationManager
from .parser import open_source
from .pipeline import EpgLoader, log_load_summary
from .svdrp import SvdrpSession

# Package version
from . import __version__


def setup_logging(logging_config: dict, log_file: Path, retention_config: dict):
    """Setup logging configuration with unified retention policy"""
    # Create log directory
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Determine file logging level based on mode
    if logging_config["level"] == "warning":
        file_level = logging.WARNING
    elif logging_config["level"] == "debug":
        file_level = logging.DEBUG
    else:  # default
        file_level = logging.INFO

    file_handler = LogRotationManager.create_rotating_handler(log_file, retention_config)
    file_handler.setLevel(file_level)

    file_formatter = logging.Formatter(
        "%(asctime)s %(levelname)-8s %(message)s", datefmt="%Y/%m/%d %H:%M:%S"
    )
    file_handler.setFormatter(file_formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(file_level)
    root_logger.handlers.clear()
    root_logger.addHandler(file_handler)

    # Console logging only if --console is specified (and not --quiet)
    if logging_config["console"] and not logging_config["quiet"]:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(file_level)
        formatter = logging.Formatter("%(levelname)s: [%(threadName)s] %(message)s")
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    return file_handler


def load_epg(config_manager: ConfigManager) -> int:
    """Run one epg-load with the effective settings, returns the events sent"""
    settings = config_manager.settings
    directory = load_channels_conf(settings["channels"], encoding=settings["encoding"])
    if not directory:
        logging.warning("No channels found in %s, every event will be dropped",
                        settings["channels"])

    vdrhost, vdrport = config_manager.get_vdr_address()
    session = SvdrpSession(
        vdrhost,
        vdrport,
        directory,
        encoding=settings["encoding"],
    )

    with open_source(settings["xmltv"]) as stream:
        result = EpgLoader(directory, session).load(stream)

    log_load_summary(result)
    return result.events_sent


def main(argv=None) -> int:
    """Main application entry point"""
    start_time = time.time()

    arg_parser = ArgumentParser()
    args = arg_parser.parse_args(argv)

    defaults = arg_parser.get_system_defaults(args.basedir)
    config_file = args.config_file or defaults["config_file"]
    log_file = defaults["log_file"]

    arg_parser.create_directories_with_proper_permissions(defaults)

    try:
        config_manager = ConfigManager(config_file)
        config_manager.load_config(
            vdrhost=args.vdrhost,
            vdrport=args.vdrport,
            channels=args.channels_conf,
            xmltv=args.xmltv,
        )
    except (OSError, ET.ParseError) as e:
        print(f"xmltv2vdr: cannot load configuration {config_file}: {e}", file=sys.stderr)
        return 1

    retention_config = config_manager.get_retention_config()
    logging_config = arg_parser.get_logging_config(args)
    setup_logging(logging_config, log_file, retention_config)

    logging.info("=" * 60)
    logging.info("xmltv2vdr v%s starting - %s", __version__, args.command)
    LogRotationManager.log_rotation_policy(retention_config)
    logging.info("Config file: %s", config_file)
    config_manager.log_config_summary()

    try:
        events_sent = load_epg(config_manager)
    except Xmltv2VdrError as e:
        logging.error("EPG load failed: %s", e)
        logging.debug("Traceback:", exc_info=True)
        return 1
    except KeyboardInterrupt:
        logging.warning("EPG load interrupted")
        return 1
    except Exception:
        logging.exception("Unexpected error during EPG load")
        return 1
    else:
        logging.info("EPG load completed: %d events loaded into VDR", events_sent)
        return 0
    finally:
        logging.info("Execution time: %.2f seconds", time.time() - start_time)
        logging.info("=" * 60)


if __name__ == "__main__":
    sys.exit(main())
