"""
xmltv2vdr.parser - XMLTV decoding module

Source access, charset normalization and streaming record extraction.
"""

from .charset import is_latin1_charset, normalized_chunks, sniff_encoding
from .source import is_url, open_source
from .xmltv import ChannelRecord, ProgrammeRecord, XmltvReader

__all__ = [
    "XmltvReader",      # Streaming record iterator
    "ChannelRecord",
    "ProgrammeRecord",
    "open_source",      # File, gzip or URL access
    "is_url",
    "normalized_chunks",
    "is_latin1_charset",
    "sniff_encoding",
]
