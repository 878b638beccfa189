"""
xmltv2vdr.translator - XMLTV to VDR event translation

Resolves XMLTV channels against the VDR channel directory and turns programme
records into GuideEvents ready to be sent with PUTE.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .channels import ChannelDescriptor, ChannelDirectory
from .dictionaries import UNRATED, get_genre_codes, get_rating_code
from .parser.xmltv import ChannelRecord, ProgrammeRecord

# Event IDs are 16 bit minute counters
EVENT_ID_MODULUS = 0x10000


def parse_xmltv_time(value: str) -> datetime:
    """
    Parse an XMLTV timestamp (YYYYMMDDHHMMSS) as UTC

    Only the first 14 characters are used, a trailing zone offset is ignored.
    Raises ValueError for timestamps that cannot be sliced into a valid date.
    """
    return datetime(
        int(value[0:4]),
        int(value[4:6]),
        int(value[6:8]),
        int(value[8:10]),
        int(value[10:12]),
        int(value[12:14]),
        tzinfo=timezone.utc,
    )


def make_event_id(start_epoch: int) -> int:
    """Event ID from the start time: minutes since epoch, modulo 2^16"""
    return (start_epoch // 60) % EVENT_ID_MODULUS


@dataclass
class GuideEvent:
    """One programme airing, translated for VDR"""

    channel_call_sign: str
    channel: str
    start: datetime
    stop: datetime
    title: str
    sub_title: str = ""
    description: str = ""
    genres: List[int] = field(default_factory=list)
    rating: int = UNRATED

    @property
    def start_epoch(self) -> int:
        return int(self.start.timestamp())

    @property
    def duration(self) -> int:
        # Negative durations from broken feeds are kept as-is
        return int((self.stop - self.start).total_seconds())

    @property
    def event_id(self) -> int:
        return make_event_id(self.start_epoch)


class EventTranslator:
    """Cross-references XMLTV channels and builds GuideEvents"""

    def __init__(self, directory: ChannelDirectory):
        self.directory = directory
        self.xmltvid_to_callsign: Dict[str, str] = {}
        self.matched_channels: Dict[str, ChannelDescriptor] = {}

    def register_channel(self, record: ChannelRecord) -> Optional[str]:
        """
        Map an XMLTV channel to a VDR call sign

        The first display name found in the directory wins. Channels without
        any match are dropped and their programmes stay unmapped.
        """
        for name in record.display_names:
            if name in self.directory:
                channel = self.directory.with_aliases(name, record.display_names)
                self.xmltvid_to_callsign[record.channel_id] = channel.call_sign
                self.matched_channels[channel.call_sign] = channel
                logging.debug(
                    "channel: new channel: %s (%s) (xmltvid: %s)",
                    channel.name,
                    channel.call_sign,
                    record.channel_id,
                )
                return channel.call_sign

        logging.debug(
            "channel: no VDR channel for xmltvid %s (names: %s)",
            record.channel_id,
            ", ".join(record.display_names),
        )
        return None

    def translate(self, record: ProgrammeRecord) -> GuideEvent:
        """Build the GuideEvent for a programme, unmapped channels get an empty call sign"""
        return GuideEvent(
            channel_call_sign=self.xmltvid_to_callsign.get(record.channel, ""),
            channel=record.channel,
            start=parse_xmltv_time(record.start),
            stop=parse_xmltv_time(record.stop),
            title=record.title,
            sub_title=record.sub_title,
            description=record.description,
            genres=get_genre_codes(record.categories),
            rating=get_rating_code(record.rating),
        )
