"""
xmltv2vdr.parser.xmltv - Streaming XMLTV reader

Pull-parses an XMLTV document and yields channel and programme records in
document order. Elements are released as soon as they are decoded so large
guides are processed in constant memory.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, List, Optional, Union

from .charset import DEFAULT_CHUNK_SIZE, normalized_chunks
from .source import READ_ERRORS


@dataclass
class ChannelRecord:
    """XMLTV <channel> element"""

    channel_id: str
    display_names: List[str] = field(default_factory=list)


@dataclass
class ProgrammeRecord:
    """XMLTV <programme> element"""

    channel: str
    start: str
    stop: str
    title: str = ""
    sub_title: str = ""
    description: str = ""
    categories: List[str] = field(default_factory=list)
    rating: Optional[str] = None


Record = Union[ChannelRecord, ProgrammeRecord]


def _text(element: ET.Element, path: str) -> str:
    """Text of the first matching child, empty string if missing"""
    return element.findtext(path) or ""


def decode_channel(element: ET.Element) -> ChannelRecord:
    channel_id = element.get("id")
    if not channel_id:
        raise ValueError("channel without id attribute")

    names = [name.text or "" for name in element.findall("display-name")]
    return ChannelRecord(channel_id=channel_id, display_names=[name for name in names if name])


def decode_programme(element: ET.Element) -> ProgrammeRecord:
    attributes = {}
    for name in ("channel", "start", "stop"):
        value = element.get(name)
        if value is None:
            raise ValueError(f"programme without {name} attribute")
        attributes[name] = value

    rating = element.findtext("rating/value")

    return ProgrammeRecord(
        channel=attributes["channel"],
        start=attributes["start"],
        stop=attributes["stop"],
        title=_text(element, "title"),
        sub_title=_text(element, "sub-title"),
        description=_text(element, "desc"),
        categories=[c.text or "" for c in element.findall("category")],
        rating=rating,
    )


class XmltvReader:
    """Iterate over the channel and programme records of an XMLTV stream"""

    DECODERS = {
        "channel": decode_channel,
        "programme": decode_programme,
    }

    def __init__(self, stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.stream = stream
        self.chunk_size = chunk_size

        # Statistics
        self.channel_count = 0
        self.programme_count = 0
        self.skipped_count = 0
        self.truncated = False

    def __iter__(self) -> Iterator[Record]:
        parser = ET.XMLPullParser(events=("start", "end"))
        state = {"root": None, "depth": 0}

        # Tokenizer errors are queued by the pull parser and raised from read_events().
        # A failing read ends the document the same way.
        try:
            for chunk in normalized_chunks(self.stream, self.chunk_size):
                parser.feed(chunk)
                yield from self._drain(parser, state)

            parser.close()
            yield from self._drain(parser, state)
        except (ET.ParseError,) + READ_ERRORS as e:
            self._stop(e)
            return

        logging.debug("XML: decoding done")

    def _stop(self, error: Exception):
        """Tokenizer or read failure ends the document like end of input"""
        self.truncated = True
        logging.warning(
            "XML: %s, no further records read: %s",
            "decoding error" if isinstance(error, ET.ParseError) else "read error",
            error,
        )

    def _drain(self, parser: ET.XMLPullParser, state: dict) -> Iterator[Record]:
        """Decode top-level elements completed so far"""
        for event, element in parser.read_events():
            if event == "start":
                if state["root"] is None:
                    state["root"] = element
                state["depth"] += 1
                continue

            state["depth"] -= 1
            if state["depth"] != 1:
                continue

            decoder = self.DECODERS.get(element.tag)
            if decoder is not None:
                try:
                    record = decoder(element)
                except ValueError as e:
                    self.skipped_count += 1
                    logging.warning("XML: skipping malformed <%s>: %s", element.tag, e)
                else:
                    if isinstance(record, ChannelRecord):
                        self.channel_count += 1
                    else:
                        self.programme_count += 1
                    yield record

            state["root"].clear()
