"""
xmltv2vdr.logrotate - Built-in log rotation

xmltv2vdr usually runs from cron, once per guide refresh, so rotation is
checked when the handler is created as well as on each record. The
copytruncate strategy keeps 'tail -f' on the log file working.
"""

import logging
import logging.handlers
import shutil
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional


class CopyTruncateTimedRotatingFileHandler(logging.handlers.BaseRotatingHandler):
    """Daily/weekly/monthly rotating file handler using copytruncate"""

    SUFFIXES = {
        "DAILY": "%Y-%m-%d",
        "WEEKLY": "%Y-W%U",  # Sunday as first day
        "MONTHLY": "%Y-%m",
    }

    def __init__(
        self,
        filename: str,
        when: str = "daily",
        backup_count: int = 7,
        encoding: Optional[str] = None,
    ):
        when = when.upper()
        if when == "MIDNIGHT":
            when = "DAILY"
        if when not in self.SUFFIXES:
            raise ValueError(f"Invalid rotation interval: {when}")

        super().__init__(filename, "a", encoding=encoding, delay=False)

        self.when = when
        self.suffix = self.SUFFIXES[when]
        self.backup_count = backup_count

        # Catch-up rotation when the log was last written in an earlier period
        log_file = Path(self.baseFilename)
        if log_file.exists() and log_file.stat().st_size > 0:
            last_write = datetime.fromtimestamp(log_file.stat().st_mtime)
            self.period_start = self._period_start(last_write)
        else:
            self.period_start = self._period_start(datetime.now())
        self.rollover_at = self._next_period_start(self.period_start).timestamp()

    def _period_start(self, moment: datetime) -> datetime:
        """Start of the rotation period containing moment"""
        day = moment.replace(hour=0, minute=0, second=0, microsecond=0)
        if self.when == "WEEKLY":
            # weekday() returns 0=Monday, 6=Sunday
            return day - timedelta(days=(day.weekday() + 1) % 7)
        if self.when == "MONTHLY":
            return day.replace(day=1)
        return day

    def _next_period_start(self, period_start: datetime) -> datetime:
        if self.when == "WEEKLY":
            return period_start + timedelta(days=7)
        if self.when == "MONTHLY":
            if period_start.month == 12:
                return period_start.replace(year=period_start.year + 1, month=1)
            return period_start.replace(month=period_start.month + 1)
        return period_start + timedelta(days=1)

    def shouldRollover(self, record) -> bool:
        return time.time() >= self.rollover_at

    def doRollover(self):
        """Copy the log to a period-suffixed backup, then truncate it in place"""
        if self.stream:
            self.stream.close()
            self.stream = None

        backup_filename = f"{self.baseFilename}.{self.period_start.strftime(self.suffix)}"
        counter = 1
        original_backup = backup_filename
        while Path(backup_filename).exists():
            backup_filename = f"{original_backup}.{counter}"
            counter += 1

        try:
            if Path(self.baseFilename).exists():
                shutil.copy2(self.baseFilename, backup_filename)
                with open(self.baseFilename, "w") as f:
                    f.truncate(0)

            if self.backup_count > 0:
                self._cleanup_old_backups()
        except OSError as e:
            # Logging from inside the handler would recurse
            print(f"xmltv2vdr: log rotation failed: {e}", file=sys.stderr)

        self.period_start = self._period_start(datetime.now())
        self.rollover_at = self._next_period_start(self.period_start).timestamp()
        self.stream = self._open()

    def _cleanup_old_backups(self):
        """Remove backup files beyond backup_count, oldest first"""
        log_file = Path(self.baseFilename)
        backups = sorted(
            (p for p in log_file.parent.glob(f"{log_file.name}.*") if p != log_file),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        for old_backup in backups[self.backup_count:]:
            old_backup.unlink()


class LogRotationManager:
    """Builds the log file handler from the retention configuration"""

    @staticmethod
    def create_rotating_handler(log_file: Path, retention_config: dict) -> logging.Handler:
        """
        Create appropriate log handler based on retention configuration.

        Args:
            log_file: Path to log file
            retention_config: Retention configuration from ConfigManager

        Returns:
            Configured logging handler
        """
        if not retention_config.get("enabled", False):
            return logging.FileHandler(log_file, mode="a", encoding="utf-8")

        return CopyTruncateTimedRotatingFileHandler(
            filename=str(log_file),
            when=retention_config.get("interval", "daily"),
            backup_count=retention_config.get("keep_files", 7),
            encoding="utf-8",
        )

    @staticmethod
    def log_rotation_policy(retention_config: dict):
        """Log the active rotation policy once logging is configured"""
        if not retention_config.get("enabled", False):
            logging.debug("Log rotation disabled - using standard FileHandler")
            return

        log_retention_days = retention_config.get("log_retention_days", 30)
        retention_desc = "unlimited" if log_retention_days == 0 else f"{log_retention_days} days"
        logging.info(
            "Log rotation enabled: %s rotation, %s retention (%d backup files)",
            retention_config.get("interval", "daily"),
            retention_desc,
            retention_config.get("keep_files", 7),
        )
