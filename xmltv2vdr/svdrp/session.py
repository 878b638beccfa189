"""
xmltv2vdr.svdrp.session - SVDRP client session

Talks to VDR's SVDRP port to replace its EPG: the guide is cleared with CLRE,
then events are streamed per channel inside PUTE blocks. Only the opening and
closing of a block wait for a reply; event lines are written without one.

Every reply is verified against the expected status code. Any mismatch or I/O
failure moves the session to FAULT and raises, there is no recovery.
"""

import logging
import socket
from enum import Enum
from typing import BinaryIO, Dict, Iterable, List, Optional

from ..channels import ChannelDirectory, make_channel_id
from ..errors import SvdrpConnectionError, SvdrpError, SvdrpProtocolError
from ..translator import GuideEvent
from . import codes

DEFAULT_PORT = 6419


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    AWAITING_GREETING = "awaiting greeting"
    READY = "ready"
    CHANNEL_OPEN = "channel open"
    CLOSING = "closing"
    CLOSED = "closed"
    FAULT = "fault"


def clean_text(text: str) -> str:
    """Keep text on a single line, VDR turns '|' back into line breaks"""
    return text.replace("\r\n", "|").replace("\n", "|").replace("\r", "|")


def format_event(event: GuideEvent) -> List[str]:
    """PUTE data lines for one event, from the E header to the e terminator"""
    lines = [
        f"E {event.event_id} {event.start_epoch} {event.duration} 0",
        f"T {clean_text(event.title)}",
    ]
    if event.sub_title:
        lines.append(f"S {clean_text(event.sub_title)}")
    lines.append(f"D {clean_text(event.description)}")
    # Content codes go out as two hex digits, the form VDR parses G lines in,
    # not the decimal numbers some older loaders sent
    lines.append("G " + " ".join("%02X" % genre for genre in event.genres))
    lines.append(f"R {event.rating}")
    lines.append("e")
    return lines


class SvdrpSession:
    """Single SVDRP connection loading EPG data into VDR"""

    def __init__(
        self,
        host: str,
        port: int,
        directory: ChannelDirectory,
        encoding: str = "utf-8",
    ):
        self.host = host
        self.port = int(port)
        self.directory = directory
        self.encoding = encoding

        self.state = SessionState.DISCONNECTED
        self.current_channel: Optional[str] = None

        self._sock: Optional[socket.socket] = None
        self._reader: Optional[BinaryIO] = None

        # Statistics
        self.channel_counts: Dict[str, int] = {}
        self.dropped_count = 0
        self.blocks_sent = 0

    # Connection handling

    def connect(self):
        """Connect, wait for the greeting and clear VDR's EPG"""
        self._expect_state(SessionState.DISCONNECTED)

        try:
            self._sock = socket.create_connection((self.host, self.port))
        except OSError as e:
            self.state = SessionState.FAULT
            raise SvdrpConnectionError(self.host, self.port, e) from e

        self._reader = self._sock.makefile("rb")
        self.state = SessionState.AWAITING_GREETING
        logging.debug("svdrp: connected to %s:%d", self.host, self.port)

        self.wait_for_reply(codes.SERVICE_READY)
        self.command(codes.CLEAR_EPG, codes.ACTION_OK)
        self.state = SessionState.READY
        logging.info("svdrp: connected to VDR at %s:%d, EPG cleared", self.host, self.port)

    def quit(self):
        """Close any open channel block, send QUIT and disconnect"""
        self._expect_state(SessionState.READY, SessionState.CHANNEL_OPEN)

        if self.state == SessionState.CHANNEL_OPEN:
            self.close_channel()

        self.state = SessionState.CLOSING
        self.command(codes.QUIT, codes.SERVICE_CLOSING)
        self._disconnect()
        self.state = SessionState.CLOSED
        logging.debug("svdrp: connection closed")

    def _disconnect(self):
        for resource in (self._reader, self._sock):
            if resource is not None:
                try:
                    resource.close()
                except OSError as e:
                    logging.debug("svdrp: error closing connection: %s", e)
        self._reader = None
        self._sock = None

    def _fault(self, error: SvdrpError) -> SvdrpError:
        """Enter the absorbing FAULT state"""
        self.state = SessionState.FAULT
        self._disconnect()
        return error

    def _expect_state(self, *states: SessionState):
        if self.state not in states:
            raise SvdrpError(
                f"svdrp: invalid session state {self.state.value}, expected "
                + " or ".join(state.value for state in states)
            )

    # Line I/O

    def write(self, *lines: str):
        """Send CRLF terminated lines"""
        data = "".join(f"{line}\r\n" for line in lines)
        for line in lines:
            logging.debug("svdrp: sending '%s'", line)

        try:
            self._sock.sendall(data.encode(self.encoding, errors="replace"))
        except OSError as e:
            raise self._fault(SvdrpProtocolError(f"svdrp: write error: {e}")) from e

    def wait_for_reply(self, code: int) -> str:
        """Read one reply line and verify its status code"""
        logging.debug("svdrp: waiting for reply '%d' (%s)", code, codes.describe(code))

        try:
            raw = self._reader.readline()
        except OSError as e:
            raise self._fault(
                SvdrpProtocolError(f"svdrp: read error: {e}", expected=code)
            ) from e

        if not raw:
            raise self._fault(
                SvdrpProtocolError("svdrp: connection closed by VDR", expected=code)
            )

        line = raw.decode(self.encoding, errors="replace").rstrip("\r\n")
        status = line[0:3]
        if status != str(code):
            logging.debug("svdrp: status=%s; data=%s", status, line)
            raise self._fault(
                SvdrpProtocolError(
                    f"svdrp: vdr reply code ({status}) didn't match expected "
                    f"({code}, {codes.describe(code)}): {line}",
                    expected=code,
                    received=status,
                    line=line,
                )
            )

        logging.debug("svdrp: got reply: %s", line)
        return line

    def command(self, command: str, code: int) -> str:
        """Send a command and verify the reply"""
        self.write(command)
        return self.wait_for_reply(code)

    # EPG blocks

    def open_channel(self, call_sign: str):
        """Start a PUTE block for a channel"""
        self._expect_state(SessionState.READY)

        channel = self.directory[call_sign]
        self.command(codes.PUT_EPG, codes.EPG_START_SENDING)
        self.write(f"C {make_channel_id(channel)} {call_sign}")

        self.state = SessionState.CHANNEL_OPEN
        self.current_channel = call_sign
        self.blocks_sent += 1

    def close_channel(self):
        """Terminate the channel and the PUTE block"""
        self._expect_state(SessionState.CHANNEL_OPEN)

        self.write(codes.CHANNEL_END)
        self.command(codes.DATA_END, codes.ACTION_OK)

        self.state = SessionState.READY
        self.current_channel = None

    def send_event(self, event: GuideEvent) -> bool:
        """
        Stream one event, switching channel blocks when the call sign changes

        Returns:
            False if the event was dropped because its channel is unknown to VDR
        """
        self._expect_state(SessionState.READY, SessionState.CHANNEL_OPEN)

        call_sign = event.channel_call_sign
        if call_sign not in self.directory:
            self.dropped_count += 1
            logging.debug(
                "svdrp: dropping '%s' (xmltvid %s): no VDR channel", event.title, event.channel
            )
            return False

        if self.state == SessionState.CHANNEL_OPEN and self.current_channel != call_sign:
            self.close_channel()

        if self.state == SessionState.READY:
            self.open_channel(call_sign)

        self.write(*format_event(event))
        self.channel_counts[call_sign] = self.channel_counts.get(call_sign, 0) + 1
        return True

    def run(self, events: Iterable[GuideEvent]) -> Dict[str, int]:
        """
        Full session: connect, send all events, quit

        Returns:
            Events sent per call sign
        """
        self.connect()
        try:
            for event in events:
                self.send_event(event)
            self.quit()
        except Exception:
            if self.state != SessionState.FAULT:
                self.state = SessionState.FAULT
                self._disconnect()
            raise

        self.log_summary()
        return self.channel_counts

    def log_summary(self):
        for call_sign, count in self.channel_counts.items():
            logging.info("epg: channel: %s loaded: %d events", call_sign, count)
        if self.dropped_count:
            logging.info("epg: %d events dropped (channel not in VDR)", self.dropped_count)
