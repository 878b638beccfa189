"""
xmltv2vdr - XMLTV to VDR EPG loader

Streams an XMLTV program guide into a running VDR (Video Disk Recorder)
over its SVDRP control protocol, matching XMLTV channels against VDR's
channels.conf.
"""

__version__ = "1.0.0"
__license__ = "GPL-3.0"

from .channels import ChannelDescriptor, ChannelDirectory, load_channels_conf
from .config import ConfigManager
from .errors import (
    Xmltv2VdrError,
    ChannelsConfError,
    SourceError,
    SvdrpError,
    SvdrpConnectionError,
    SvdrpProtocolError,
)
from .pipeline import EpgLoader, LoadResult
from .svdrp import SvdrpSession
from .translator import EventTranslator, GuideEvent

__all__ = [
    "ChannelDescriptor",
    "ChannelDirectory",
    "load_channels_conf",
    "ConfigManager",
    "Xmltv2VdrError",
    "ChannelsConfError",
    "SourceError",
    "SvdrpError",
    "SvdrpConnectionError",
    "SvdrpProtocolError",
    "EpgLoader",
    "LoadResult",
    "SvdrpSession",
    "EventTranslator",
    "GuideEvent",
]
