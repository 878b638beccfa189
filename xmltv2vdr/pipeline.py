"""
xmltv2vdr.pipeline - EPG load coordinator

Runs XMLTV decoding and translation in the calling thread and the SVDRP
session in a worker thread. Both sides are joined by a queue holding a single
event, so decoding never runs ahead of what VDR has accepted by more than one
event. Document order is preserved end to end.
"""

import logging
import queue
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterator

from .channels import ChannelDirectory
from .errors import SvdrpError, Xmltv2VdrError
from .parser.xmltv import ChannelRecord, XmltvReader
from .svdrp import SvdrpSession
from .translator import EventTranslator, GuideEvent

QUEUE_DEPTH = 1

# How often a blocked producer checks whether the session is still alive
POLL_INTERVAL = 0.5

END_OF_INPUT = object()
ABORT = object()


class LoadAborted(Xmltv2VdrError):
    """Producer failed, the session stops without sending QUIT"""


@dataclass
class LoadResult:
    """Outcome of one EPG load"""

    channel_counts: Dict[str, int] = field(default_factory=dict)
    dropped_events: int = 0
    channels_read: int = 0
    channels_matched: int = 0
    programmes_read: int = 0
    programmes_skipped: int = 0
    elements_skipped: int = 0
    truncated: bool = False

    @property
    def events_sent(self) -> int:
        return sum(self.channel_counts.values())


def _queued_events(events: "queue.Queue") -> Iterator[GuideEvent]:
    """Consumer side of the queue, ends at END_OF_INPUT"""
    while True:
        item = events.get()
        if item is END_OF_INPUT:
            return
        if item is ABORT:
            raise LoadAborted("EPG load aborted: XMLTV processing failed")
        yield item


class EpgLoader:
    """Feeds an XMLTV stream through a SvdrpSession"""

    def __init__(self, directory: ChannelDirectory, session: SvdrpSession):
        self.directory = directory
        self.session = session

    def load(self, stream: BinaryIO) -> LoadResult:
        """
        Load all programmes of an XMLTV stream into VDR

        Raises:
            SvdrpError: on any connection or protocol failure (fatal)
        """
        translator = EventTranslator(self.directory)
        reader = XmltvReader(stream)
        result = LoadResult()
        events: "queue.Queue" = queue.Queue(maxsize=QUEUE_DEPTH)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="svdrp") as executor:
            session_done = executor.submit(self.session.run, _queued_events(events))

            try:
                for record in reader:
                    if isinstance(record, ChannelRecord):
                        if translator.register_channel(record):
                            result.channels_matched += 1
                        continue

                    try:
                        event = translator.translate(record)
                    except ValueError as e:
                        result.programmes_skipped += 1
                        logging.warning(
                            "XML: skipping programme on %s (start=%s, stop=%s): %s",
                            record.channel,
                            record.start,
                            record.stop,
                            e,
                        )
                        continue

                    self._enqueue(events, event, session_done)

                self._enqueue(events, END_OF_INPUT, session_done)
            except BaseException:
                self._abort(events, session_done)
                raise

            result.channel_counts = session_done.result()

        result.dropped_events = self.session.dropped_count
        result.channels_read = reader.channel_count
        result.programmes_read = reader.programme_count
        result.elements_skipped = reader.skipped_count
        result.truncated = reader.truncated
        return result

    @staticmethod
    def _enqueue(events: "queue.Queue", item, session_done: Future):
        """Blocking put that gives up once the session has stopped"""
        while True:
            try:
                events.put(item, timeout=POLL_INTERVAL)
                return
            except queue.Full:
                if session_done.done():
                    # Re-raises the session's fatal error
                    session_done.result()
                    raise SvdrpError("svdrp: session ended before end of input")

    @staticmethod
    def _abort(events: "queue.Queue", session_done: Future):
        """Wake up a waiting session so the worker thread can exit"""
        while not session_done.done():
            try:
                events.put(ABORT, timeout=POLL_INTERVAL)
                return
            except queue.Full:
                continue


def log_load_summary(result: LoadResult):
    """Log statistics of a finished load"""
    logging.info("EPG LOAD SUMMARY:")
    logging.info("  XMLTV channels read: %d (%d matched in VDR)",
                 result.channels_read, result.channels_matched)
    logging.info("  XMLTV programmes read: %d", result.programmes_read)
    logging.info("  Events sent to VDR: %d on %d channels",
                 result.events_sent, len(result.channel_counts))

    if result.dropped_events:
        logging.info("  Events dropped (no VDR channel): %d", result.dropped_events)
    if result.programmes_skipped or result.elements_skipped:
        logging.warning("  Malformed elements skipped: %d",
                        result.programmes_skipped + result.elements_skipped)
    if result.truncated:
        logging.warning("  XMLTV document ended early on a parse or read error")
