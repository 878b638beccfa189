"""
xmltv2vdr.errors - Exception hierarchy

Fatal errors abort the load run. XML decoding problems and lookup misses are
handled where they occur and never surface as exceptions.
"""

from typing import Optional


class Xmltv2VdrError(Exception):
    """Base class for all fatal xmltv2vdr errors"""


class ChannelsConfError(Xmltv2VdrError):
    """VDR channels.conf could not be read"""


class SourceError(Xmltv2VdrError):
    """XMLTV source could not be opened or fetched"""


class SvdrpError(Xmltv2VdrError):
    """Base class for SVDRP session failures"""


class SvdrpConnectionError(SvdrpError):
    """TCP connection to VDR could not be established"""

    def __init__(self, host: str, port: int, reason: Exception):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"connect to {host}:{port} failed: {reason}")


class SvdrpProtocolError(SvdrpError):
    """VDR reply was missing or did not carry the expected status code"""

    def __init__(
        self,
        message: str,
        expected: Optional[int] = None,
        received: Optional[str] = None,
        line: Optional[str] = None,
    ):
        self.expected = expected
        self.received = received
        self.line = line
        super().__init__(message)
