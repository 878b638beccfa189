"""
xmltv2vdr.parser.source - XMLTV source access

Opens XMLTV data from a local file, a gzip compressed file or an HTTP(S) URL
and hands back a binary stream. Downloads are streamed, never buffered whole.
"""

import gzip
import logging
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

import requests
import urllib3

from ..errors import SourceError

URL_SCHEMES = ("http://", "https://")

# Failures while reading an opened source: dropped connections, truncated or
# corrupt gzip data and urllib3 errors raised from the raw response stream
READ_ERRORS = (
    OSError,
    EOFError,
    zlib.error,
    requests.exceptions.RequestException,
    urllib3.exceptions.HTTPError,
)


def is_url(location: Union[str, Path]) -> bool:
    """Check if the XMLTV location is a remote URL"""
    return str(location).lower().startswith(URL_SCHEMES)


@contextmanager
def open_source(location: Union[str, Path], timeout: int = 30) -> Iterator[BinaryIO]:
    """
    Open an XMLTV source for binary reading

    Args:
        location: File path or http(s) URL, ".gz" suffix means gzip compressed
        timeout: HTTP connect/read timeout in seconds (URLs only)

    Raises:
        SourceError: if the source cannot be opened
    """
    if is_url(location):
        with _open_url(str(location), timeout) as stream:
            yield stream
        return

    path = Path(location)
    try:
        if path.suffix == ".gz":
            stream = gzip.open(path, "rb")
        else:
            stream = open(path, "rb")
    except OSError as e:
        raise SourceError(f"cannot open XMLTV file {path}: {e}") from e

    logging.info("Reading XMLTV data from: %s", path)
    with stream:
        yield stream


@contextmanager
def _open_url(url: str, timeout: int) -> Iterator[BinaryIO]:
    """Stream an XMLTV document over HTTP"""
    try:
        response = requests.get(url, stream=True, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise SourceError(f"cannot fetch XMLTV data from {url}: {e}") from e

    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        response.close()
        raise SourceError(f"cannot fetch XMLTV data from {url}: {e}") from e

    logging.info("Downloading XMLTV data from: %s", url)
    logging.debug("  HTTP %d, Content-Type: %s", response.status_code,
                  response.headers.get("Content-Type", "unknown"))

    try:
        # Let urllib3 undo any Content-Encoding, gzip payloads are handled below
        response.raw.decode_content = True
        if url.lower().split("?")[0].endswith(".gz"):
            with gzip.GzipFile(fileobj=response.raw) as stream:
                yield stream
        else:
            yield response.raw
    finally:
        response.close()
