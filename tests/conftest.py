"""
Pytest configuration and fixtures for xmltv2vdr tests.
"""
import socket
import threading

import pytest

from xmltv2vdr.channels import parse_channels

DEFAULT_REPLIES = {
    "CLRE": "250 EPG data cleared",
    "PUTE": "354 Enter EPG data, end with \".\" on a line by itself",
    ".": "250 EPG data processed",
    "QUIT": "221 vdr closing connection",
}


class FakeVdr:
    """Single connection SVDRP server recording every line it receives"""

    def __init__(self, greeting="220 vdr SVDRP VideoDiskRecorder 2.6.0; UTF-8", replies=None):
        self.greeting = greeting
        self.replies = dict(DEFAULT_REPLIES)
        self.replies.update(replies or {})
        self.received = []
        self.finished = threading.Event()

        self._server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._server.bind(("127.0.0.1", 0))
        self._server.listen(1)
        self._server.settimeout(5)
        self.host, self.port = self._server.getsockname()

        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        try:
            conn, _ = self._server.accept()
        except OSError:
            self.finished.set()
            return

        try:
            with conn, conn.makefile("rb") as reader:
                self._send(conn, self.greeting)
                in_data = False
                for raw in reader:
                    line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                    self.received.append(line)

                    if in_data:
                        if line != ".":
                            continue
                        in_data = False
                        reply = self.replies["."]
                    else:
                        command = line.split(" ")[0]
                        reply = self.replies.get(command, "500 Command unrecognized")
                        in_data = command == "PUTE" and reply.startswith("354")

                    self._send(conn, reply)
                    if line == "QUIT":
                        break
        except OSError:
            # Client went away after a protocol fault
            pass
        finally:
            self.finished.set()

    @staticmethod
    def _send(conn, line):
        conn.sendall((line + "\r\n").encode("utf-8"))

    def wait(self, timeout=5):
        return self.finished.wait(timeout)

    @property
    def commands(self):
        """Received lines that are SVDRP commands, data lines excluded"""
        return [line for line in self.received if line.split(" ")[0] in DEFAULT_REPLIES]

    def close(self):
        self._server.close()
        self._thread.join(timeout=5)


@pytest.fixture
def fake_vdr():
    """Factory starting FakeVdr servers, all closed at teardown"""
    servers = []

    def start(**kwargs):
        server = FakeVdr(**kwargs)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.close()


@pytest.fixture
def unused_port():
    """A local TCP port nobody listens on"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def sample_channels_conf():
    """Sample VDR channels.conf content"""
    return """:Boston ATSC
ABC,WCVB;ATSC:474000:M10:T:0:49=2:52=eng@106:0:0:3:0:0:0
NBC,WHDH:195028:M10:A:0:49=2:52=eng@106:0:0:4:0:0:0
:Satellite
Sat One,SAT1;Provider:11954:HC34M2S0:S:27500:101=2:102=deu:104:0:7:1:1:0
Broken,LINE:12345:M10
"""


@pytest.fixture
def sample_channels_file(sample_channels_conf, tmp_path):
    """Create a temporary channels.conf for testing"""
    channels_file = tmp_path / "channels.conf"
    channels_file.write_text(sample_channels_conf, encoding="utf-8")
    return channels_file


@pytest.fixture
def directory(sample_channels_conf):
    """ChannelDirectory built from the sample channels.conf"""
    return parse_channels(sample_channels_conf.splitlines())


@pytest.fixture
def sample_xmltv():
    """Sample XMLTV document (UTF-8)"""
    return """<?xml version="1.0" encoding="UTF-8"?>
<tv generator-info-name="test">
  <channel id="wcvb.us">
    <display-name>5 WCVB</display-name>
    <display-name>WCVB</display-name>
  </channel>
  <channel id="whdh.us">
    <display-name>WHDH</display-name>
  </channel>
  <channel id="other.us">
    <display-name>OTHER</display-name>
  </channel>
  <programme start="20240101120000 +0000" stop="20240101130000 +0000" channel="wcvb.us">
    <title>Midday News</title>
    <desc>Local news.
Weather at noon.</desc>
    <category>News</category>
    <rating system="VCHIP">
      <value>TV-PG</value>
    </rating>
  </programme>
  <programme start="20240101130000 +0000" stop="20240101133000 +0000" channel="wcvb.us">
    <title>Quiz Night</title>
    <sub-title>Round 1</sub-title>
    <category>Game Show/Quiz/Contest</category>
    <category>Not A Genre</category>
  </programme>
  <programme start="20240101140000 +0000" stop="20240101160000 +0000" channel="whdh.us">
    <title>Café Movie</title>
    <category>Movie/Drama</category>
    <category>Comedy</category>
  </programme>
  <programme start="20240101120000 +0000" stop="20240101130000 +0000" channel="other.us">
    <title>Nobody Watches</title>
  </programme>
</tv>
"""


@pytest.fixture
def sample_xmltv_file(sample_xmltv, tmp_path):
    """Create a temporary XMLTV file for testing"""
    xmltv_file = tmp_path / "guide.xml"
    xmltv_file.write_text(sample_xmltv, encoding="utf-8")
    return xmltv_file


@pytest.fixture
def latin1_xmltv():
    """XMLTV document declaring and using ISO-8859-1"""
    return """<?xml version="1.0" encoding="ISO-8859-1"?>
<tv>
  <channel id="wcvb.us">
    <display-name>WCVB</display-name>
  </channel>
  <programme start="20240101120000 +0000" stop="20240101130000 +0000" channel="wcvb.us">
    <title>Téléjournal</title>
    <desc>Émission spéciale à Montréal</desc>
  </programme>
</tv>
""".encode("iso-8859-1")
