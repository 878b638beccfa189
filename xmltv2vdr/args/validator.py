"""
Argument validation module for xmltv2vdr

Handles validation of the VDR address and input locations given on the
command line.
"""

import re
from pathlib import Path
from typing import Optional, Tuple

from ..parser.source import is_url


class ArgumentValidator:
    """Validates command-line arguments"""

    # host, host:port, [ipv6]:port
    HOST_PATTERN = re.compile(
        r"^(?:\[(?P<ipv6>[0-9A-Fa-f:.]+)\]|(?P<host>[^:\s\[\]]+))(?::(?P<port>[0-9]+))?$"
    )

    @classmethod
    def parse_host(cls, value: Optional[str]) -> Tuple[Optional[str], Optional[int]]:
        """
        Split a --host value into host and port

        Args:
            value: "host", "host:port" or "[ipv6]:port"

        Returns:
            Tuple of (host, port), port is None if not given

        Raises:
            ValueError: for malformed values or ports outside 1-65535
        """
        if value is None:
            return None, None

        match = cls.HOST_PATTERN.match(value.strip())
        if not match:
            raise ValueError(f"Parameter [--host] must be HOST[:PORT], got: {value}")

        host = match.group("ipv6") or match.group("host")
        port = match.group("port")
        if port is None:
            return host, None

        port = int(port)
        if port < 1 or port > 65535:
            raise ValueError(f"Parameter [--host] port must be 1-65535, got: {port}")
        return host, port

    @classmethod
    def validate_host(cls, value: Optional[str]) -> Tuple[bool, Optional[str]]:
        """Validate --host parameter"""
        try:
            cls.parse_host(value)
        except ValueError as e:
            return False, str(e)
        return True, None

    @classmethod
    def validate_channels_file(cls, path: Optional[Path]) -> Tuple[bool, Optional[str]]:
        """Validate --vdr-channels-conf parameter"""
        if path is None:
            return True, None

        if not Path(path).is_file():
            return False, f"Parameter [--vdr-channels-conf] file not found: {path}"

        return True, None

    @classmethod
    def validate_xmltv_source(cls, location: Optional[str]) -> Tuple[bool, Optional[str]]:
        """Validate --xmltv-epg-data parameter, URLs are checked when fetched"""
        if location is None or is_url(location):
            return True, None

        if not Path(location).is_file():
            return False, f"Parameter [--xmltv-epg-data] file not found: {location}"

        return True, None

    @classmethod
    def validate_all_arguments(cls, args) -> list:
        """
        Validate all arguments at once

        Returns:
            List of error messages (empty if all valid)
        """
        errors = []

        for valid, error in (
            cls.validate_host(getattr(args, "host", None)),
            cls.validate_channels_file(getattr(args, "channels_conf", None)),
            cls.validate_xmltv_source(getattr(args, "xmltv", None)),
        ):
            if not valid:
                errors.append(error)

        return errors
