"""
Path management module for xmltv2vdr

Handles default directories for configuration and logs.
"""

from pathlib import Path
from typing import Dict, Optional


class PathManager:
    """Manages default paths and directory creation"""

    @staticmethod
    def get_system_defaults(basedir: Optional[Path] = None) -> Dict[str, Path]:
        """
        Get default directories

        Args:
            basedir: Base directory override, ~/xmltv2vdr when None

        Returns:
            Dict containing base_dir, conf_dir, log_dir and file paths
        """
        base_dir = Path(basedir) if basedir else Path.home() / "xmltv2vdr"

        return {
            "base_dir": base_dir,
            "conf_dir": base_dir / "conf",
            "log_dir": base_dir / "log",
            "config_file": base_dir / "conf" / "xmltv2vdr.xml",
            "log_file": base_dir / "log" / "xmltv2vdr.log",
        }

    @staticmethod
    def create_directories(defaults: Dict[str, Path]):
        """Create configuration and log directories with 755 permissions"""
        for key in ["conf_dir", "log_dir"]:
            if key in defaults:
                directory = defaults[key]
                try:
                    directory.mkdir(parents=True, exist_ok=True, mode=0o755)
                except OSError:
                    # Fallback: create without mode specification (depends on umask)
                    directory.mkdir(parents=True, exist_ok=True)
