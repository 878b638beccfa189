"""
Tests for copytruncate log rotation.
"""
import logging
import os
import time
from datetime import datetime, timedelta

import pytest

from xmltv2vdr.logrotate import CopyTruncateTimedRotatingFileHandler, LogRotationManager


class TestCopyTruncateHandler:
    """Test suite for the rotating handler."""

    def test_invalid_interval(self, tmp_path):
        with pytest.raises(ValueError):
            CopyTruncateTimedRotatingFileHandler(str(tmp_path / "x.log"), when="hourly")

    def test_midnight_is_daily(self, tmp_path):
        handler = CopyTruncateTimedRotatingFileHandler(str(tmp_path / "x.log"), when="midnight")
        try:
            assert handler.when == "DAILY"
        finally:
            handler.close()

    def test_catch_up_rotation(self, tmp_path):
        log_file = tmp_path / "x.log"
        log_file.write_text("old line\n")
        two_days_ago = time.time() - 2 * 86400
        os.utime(log_file, (two_days_ago, two_days_ago))

        handler = CopyTruncateTimedRotatingFileHandler(str(log_file), when="daily", backup_count=3)
        try:
            assert handler.shouldRollover(None)
            handler.doRollover()
        finally:
            handler.close()

        suffix = datetime.fromtimestamp(two_days_ago).strftime("%Y-%m-%d")
        backup = tmp_path / f"x.log.{suffix}"
        assert backup.read_text() == "old line\n"
        assert log_file.read_text() == ""

    def test_cleanup_keeps_backup_count(self, tmp_path):
        log_file = tmp_path / "x.log"
        log_file.write_text("")
        for day in range(5):
            backup = tmp_path / f"x.log.2024-01-0{day + 1}"
            backup.write_text(str(day))
            stamp = time.time() - (10 - day) * 86400
            os.utime(backup, (stamp, stamp))

        handler = CopyTruncateTimedRotatingFileHandler(str(log_file), when="daily", backup_count=2)
        try:
            handler._cleanup_old_backups()
        finally:
            handler.close()

        remaining = sorted(p.name for p in tmp_path.glob("x.log.*"))
        assert remaining == ["x.log.2024-01-04", "x.log.2024-01-05"]

    def test_weekly_period_starts_sunday(self, tmp_path):
        handler = CopyTruncateTimedRotatingFileHandler(str(tmp_path / "x.log"), when="weekly")
        try:
            # 2024-01-03 is a Wednesday
            start = handler._period_start(datetime(2024, 1, 3, 15, 30))
            assert start == datetime(2023, 12, 31)
            assert handler._next_period_start(start) == start + timedelta(days=7)
        finally:
            handler.close()

    def test_monthly_period_wraps_year(self, tmp_path):
        handler = CopyTruncateTimedRotatingFileHandler(str(tmp_path / "x.log"), when="monthly")
        try:
            start = handler._period_start(datetime(2024, 12, 15))
            assert start == datetime(2024, 12, 1)
            assert handler._next_period_start(start) == datetime(2025, 1, 1)
        finally:
            handler.close()


class TestLogRotationManager:
    """Test suite for handler selection."""

    def test_rotation_disabled(self, tmp_path):
        handler = LogRotationManager.create_rotating_handler(
            tmp_path / "x.log", {"enabled": False}
        )
        try:
            assert type(handler) is logging.FileHandler
        finally:
            handler.close()

    def test_rotation_enabled(self, tmp_path):
        handler = LogRotationManager.create_rotating_handler(
            tmp_path / "x.log", {"enabled": True, "interval": "weekly", "keep_files": 4}
        )
        try:
            assert isinstance(handler, CopyTruncateTimedRotatingFileHandler)
            assert handler.when == "WEEKLY"
            assert handler.backup_count == 4
        finally:
            handler.close()
