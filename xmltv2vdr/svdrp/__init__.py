"""
xmltv2vdr.svdrp - VDR remote control protocol

Client side of SVDRP limited to what EPG loading needs.
"""

from .session import DEFAULT_PORT, SessionState, SvdrpSession, format_event

__all__ = [
    "SvdrpSession",
    "SessionState",
    "format_event",
    "DEFAULT_PORT",
]
