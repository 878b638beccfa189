"""
xmltv2vdr.config - Configuration management

Handles the XML settings file: default creation, parsing, type conversion of
known settings, command line overrides and log retention policy.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Optional


class ConfigManager:
    """Manages the xmltv2vdr settings file"""

    DEFAULT_CONFIG = """<?xml version="1.0" encoding="utf-8"?>
<settings version="1">
  <!-- VDR SVDRP connection -->
  <setting id="vdrhost">127.0.0.1</setting>
  <setting id="vdrport">6419</setting>
  <setting id="encoding">utf-8</setting>

  <!-- Input files -->
  <setting id="channels">/var/lib/vdr/channels.conf</setting>
  <setting id="xmltv">/var/lib/vdr/xmltv-epg.xml</setting>

  <!-- Log retention -->
  <setting id="logrotate">true</setting>
  <setting id="relogs">30</setting>
</settings>"""

    DEFAULTS = {
        "vdrhost": "127.0.0.1",
        "vdrport": "6419",
        "encoding": "utf-8",
        "channels": "/var/lib/vdr/channels.conf",
        "xmltv": "/var/lib/vdr/xmltv-epg.xml",
        "logrotate": "true",
        "relogs": "30",
    }

    # Valid settings and their types
    VALID_SETTINGS = {
        "vdrhost": str,
        "vdrport": int,
        "encoding": str,
        "channels": str,
        "xmltv": str,
        "logrotate": str,
        "relogs": str,
    }

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)
        self.settings: Dict[str, Any] = {}
        self.version: str = "1"
        self.config_changes: Dict[str, str] = {}  # Track command line changes for clean logging

    def load_config(
        self,
        vdrhost: Optional[str] = None,
        vdrport: Optional[int] = None,
        channels: Optional[str] = None,
        xmltv: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Load configuration file and apply command line overrides"""
        if not self.config_file.exists():
            self._create_default_config()

        self._parse_config_file()
        self._set_defaults()

        # Override with command line arguments (this execution only)
        self.config_changes = {}
        overrides = {"vdrhost": vdrhost, "vdrport": vdrport, "channels": channels, "xmltv": xmltv}
        for setting_id, value in overrides.items():
            if value is None:
                continue
            value = self._convert(setting_id, str(value))
            if value != self.settings.get(setting_id):
                self.config_changes[setting_id] = (
                    f"{self.settings.get(setting_id)} → {value} (from command line)"
                )
            self.settings[setting_id] = value

        return self.settings

    def _create_default_config(self):
        """Create default configuration file"""
        logging.info("Creating default configuration: %s", self.config_file)

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True, mode=0o755)
        except OSError:
            # Fallback: create without mode specification (depends on umask)
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            f.write(self.DEFAULT_CONFIG)

    def _parse_config_file(self):
        """Parse XML configuration file"""
        try:
            tree = ET.parse(self.config_file)
        except ET.ParseError as e:
            logging.error("Cannot parse configuration file %s: %s", self.config_file, e)
            raise

        root = tree.getroot()
        logging.info("Reading configuration from: %s", self.config_file)

        self.version = root.attrib.get("version", "1")
        logging.debug("Configuration version: %s", self.version)

        for setting in root.findall("setting"):
            setting_id = setting.get("id")

            # 'value' attribute first, then text
            setting_value = setting.get("value")
            if setting_value is None:
                setting_value = setting.text
            if setting_value is not None:
                setting_value = setting_value.strip()
            if not setting_value:
                continue

            if setting_id not in self.VALID_SETTINGS:
                logging.warning(
                    "Unknown configuration setting: %s = %s (ignored)", setting_id, setting_value
                )
                continue

            try:
                self.settings[setting_id] = self._convert(setting_id, setting_value)
            except ValueError:
                logging.warning(
                    "Invalid value for setting %s: %s (using default)", setting_id, setting_value
                )
                continue

            logging.debug("Config setting: %s = %s", setting_id, self.settings[setting_id])

    def _convert(self, setting_id: str, value: str) -> Any:
        """Type-convert a setting value"""
        expected_type = self.VALID_SETTINGS[setting_id]
        if expected_type == int:
            return int(value)
        return value

    def _set_defaults(self):
        """Fill in settings missing from the file"""
        for setting_id, default in self.DEFAULTS.items():
            if setting_id not in self.settings:
                self.settings[setting_id] = self._convert(setting_id, default)
                logging.debug("Using default: %s = %s", setting_id, default)

    def get_retention_config(self) -> Dict[str, Any]:
        """Get log rotation and retention configuration"""
        logrotate = str(self.settings.get("logrotate", "true")).lower()

        if logrotate == "false":
            rotation_enabled = False
            rotation_interval = "daily"
        elif logrotate in ("daily", "weekly", "monthly"):
            rotation_enabled = True
            rotation_interval = logrotate
        else:
            rotation_enabled = True
            rotation_interval = "daily"

        log_retention_days = self._parse_retention_to_days(
            str(self.settings.get("relogs", "30"))
        )

        return {
            "enabled": rotation_enabled,
            "interval": rotation_interval,
            "keep_files": self._days_to_keep_files(log_retention_days, rotation_interval),
            "log_retention_days": log_retention_days,
            "logrotate_setting": self.settings.get("logrotate", "true"),
            "relogs_setting": self.settings.get("relogs", "30"),
        }

    def _parse_retention_to_days(self, retention_value: str) -> int:
        """Convert retention setting to number of days (0 = unlimited)"""
        retention_value = retention_value.strip().lower()

        try:
            return int(retention_value)
        except ValueError:
            pass

        if retention_value == "weekly":
            return 7
        elif retention_value == "monthly":
            return 30
        elif retention_value == "quarterly":
            return 90
        elif retention_value == "unlimited":
            return 0

        logging.warning("Invalid retention value: %s, using 30 days", retention_value)
        return 30

    def _days_to_keep_files(self, retention_days: int, interval: str) -> int:
        """Number of rotated files covering the retention period"""
        if retention_days == 0:
            return 0
        if interval == "weekly":
            return max(1, retention_days // 7)
        if interval == "monthly":
            return max(1, retention_days // 30)
        return retention_days

    def get_vdr_address(self) -> tuple:
        return self.settings["vdrhost"], self.settings["vdrport"]

    def log_config_summary(self):
        """Log effective configuration values"""
        logging.info("Configuration values processed:")
        for setting_id in self.VALID_SETTINGS:
            if setting_id in self.config_changes:
                logging.info("  %s: %s", setting_id, self.config_changes[setting_id])
            else:
                logging.info("  %s: %s", setting_id, self.settings.get(setting_id))
