"""
xmltv2vdr.parser.charset - Character set normalization

Many XMLTV grabbers still emit ISO-8859-1 documents. When the XML prolog
declares any Latin-1 alias, each byte is decoded to the code point of the
same value before it reaches the XML tokenizer. Every other document is
passed through as raw bytes.
"""

import codecs
import logging
import re
from typing import BinaryIO, Iterator, Optional, Union

# IANA character sets registry, ISO_8859-1:1987 name and aliases
LATIN1_NAMES = frozenset(
    name.lower()
    for name in (
        "ISO_8859-1:1987",
        "ISO-8859-1",
        "iso-ir-100",
        "ISO_8859-1",
        "latin1",
        "l1",
        "IBM819",
        "CP819",
        "csISOLatin1",
    )
)

ENCODING_PATTERN = re.compile(rb"""<\?xml[^>]*?\sencoding\s*=\s*["']([A-Za-z0-9._:-]+)["']""")

DEFAULT_CHUNK_SIZE = 64 * 1024

# Minimum read used to find the encoding declaration
PROLOG_SIZE = 1024


def is_latin1_charset(charset: Optional[str]) -> bool:
    """Check if charset is one of the registered ISO-8859-1 names"""
    if not charset:
        return False
    return charset.lower() in LATIN1_NAMES


def sniff_encoding(head: bytes) -> Optional[str]:
    """Extract the encoding declared in the XML prolog, if any"""
    match = ENCODING_PATTERN.search(head)
    if match is None:
        return None
    return match.group(1).decode("ascii")


def normalized_chunks(
    stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[Union[bytes, str]]:
    """
    Read stream in chunks ready to be fed to the XML tokenizer

    Yields str chunks for Latin-1 documents and bytes chunks otherwise.
    """
    head = stream.read(max(chunk_size, PROLOG_SIZE))
    if not head:
        return

    charset = sniff_encoding(head)
    if not is_latin1_charset(charset):
        logging.debug("XML: declared charset %s, passing bytes through", charset or "(none)")
        yield head
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                return
            yield chunk

    logging.debug("XML: declared charset %s, decoding as ISO-8859-1", charset)
    decoder = codecs.getincrementaldecoder("latin-1")()
    yield decoder.decode(head)
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield decoder.decode(chunk)
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail
