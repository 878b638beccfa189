"""
xmltv2vdr.channels - VDR channel directory

Loads VDR's channels.conf into an immutable call sign directory and derives
the channel IDs VDR computes for its own channels.
"""

import collections.abc
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .errors import ChannelsConfError

# channels.conf: name,callsign;provider:frequency:param:source:srate:vpid:apid:tpid:ca:sid:nid:tid:rid
CHANNEL_FIELD_COUNT = 13

# Sources whose frequency VDR stores in kHz instead of MHz
KHZ_SOURCES = ("A", "T")


@dataclass(frozen=True)
class ChannelDescriptor:
    """One channels.conf entry"""

    name: str
    call_sign: str
    frequency: str
    param: str
    source: str
    srate: str
    vpid: str
    apid: str
    tpid: str
    cond_access: str
    service_id: str
    network_id: str
    transport_id: str
    radio_id: str
    aliases: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def channel_id(self) -> str:
        return make_channel_id(self)


def make_channel_id(channel: ChannelDescriptor) -> str:
    """
    Build the channel ID VDR uses to correlate PUTE data with its channels

    Terrestrial and ATSC frequencies are scaled down by 1000. A non-zero
    transport or network ID always selects the SOURCE-NID-TID-SID form.
    """
    try:
        frequency = int(channel.frequency)
    except ValueError:
        frequency = 0

    if channel.source in KHZ_SOURCES:
        frequency = int(frequency / 1000)

    channel_id = f"{channel.source}-{channel.network_id}-{frequency}-{channel.service_id}"

    if channel.transport_id != "0" or channel.network_id != "0":
        channel_id = (
            f"{channel.source}-{channel.network_id}-{channel.transport_id}-{channel.service_id}"
        )

    return channel_id


class ChannelDirectory(collections.abc.Mapping):
    """Read-only call sign -> ChannelDescriptor mapping"""

    def __init__(self, channels: Iterable[ChannelDescriptor] = ()):
        entries: Dict[str, ChannelDescriptor] = {}
        for channel in channels:
            entries[channel.call_sign] = channel
        self._channels = MappingProxyType(entries)

    def __getitem__(self, call_sign: str) -> ChannelDescriptor:
        return self._channels[call_sign]

    def __iter__(self) -> Iterator[str]:
        return iter(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    def __repr__(self) -> str:
        return f"ChannelDirectory({len(self)} channels)"

    def with_aliases(self, call_sign: str, names: Iterable[str]) -> Optional[ChannelDescriptor]:
        """Return a copy of the descriptor carrying XMLTV display names as aliases"""
        channel = self._channels.get(call_sign)
        if channel is None:
            return None
        return replace(channel, aliases=tuple(names))


def parse_channel_line(line: str) -> Optional[ChannelDescriptor]:
    """
    Parse one channels.conf line

    Returns None for empty lines and group separators (lines starting with ':').
    Raises ValueError for lines that are not usable channel definitions.
    """
    line = line.strip()
    if not line or line.startswith(":"):
        return None

    fields = line.split(":")
    if len(fields) < CHANNEL_FIELD_COUNT:
        raise ValueError(f"expected {CHANNEL_FIELD_COUNT} fields, got {len(fields)}")

    names = fields[0].split(",")
    if len(names) < 2:
        raise ValueError("expected 2 fields, format: <vdr name>,<xmltv identifier>")

    call_sign = names[1].split(";")[0]

    return ChannelDescriptor(
        name=names[0],
        call_sign=call_sign,
        frequency=fields[1],
        param=fields[2],
        source=fields[3],
        srate=fields[4],
        vpid=fields[5],
        apid=fields[6],
        tpid=fields[7],
        cond_access=fields[8],
        service_id=fields[9],
        network_id=fields[10],
        transport_id=fields[11],
        radio_id=fields[12],
    )


def parse_channels(lines: Iterable[str]) -> ChannelDirectory:
    """Build a ChannelDirectory from channels.conf lines, skipping bad entries"""
    channels = []
    for line_number, line in enumerate(lines, 1):
        try:
            channel = parse_channel_line(line)
        except ValueError as e:
            logging.warning("channels.conf line %d skipped: %s", line_number, e)
            continue

        if channel is not None:
            logging.debug(
                "channels.conf: %s (%s) -> %s", channel.name, channel.call_sign, channel.channel_id
            )
            channels.append(channel)

    return ChannelDirectory(channels)


def load_channels_conf(channels_file: Path, encoding: str = "utf-8") -> ChannelDirectory:
    """Load VDR channels.conf from disk"""
    channels_file = Path(channels_file)
    try:
        with open(channels_file, "r", encoding=encoding, errors="replace") as f:
            directory = parse_channels(f)
    except OSError as e:
        raise ChannelsConfError(f"cannot read {channels_file}: {e}") from e

    logging.info("%d VDR channels loaded from: %s", len(directory), channels_file)
    return directory
