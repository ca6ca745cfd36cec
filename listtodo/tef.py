"""Line-oriented TEF tokenizer.

Turns raw TEF bytes into an ordered stream of typed pieces::

    # comment
    =task FOO-1 - write the thing
    status: todo
    depends-on: FOO-0

    Free-text description, any number of lines.

Entry lines start with ``=``. Header lines follow directly until the first
blank line; everything after that up to the next entry line is content.
Content lines starting with ``==`` stand for a literal line starting ``=``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

HEADER_RE = re.compile(rb'^([^\s:#][^:]*):(.*)$')


@dataclass(frozen=True)
class NewEntry:
    type_string: str
    id_string: str


@dataclass(frozen=True)
class Comment:
    text: str


@dataclass(frozen=True)
class ContentChunk:
    data: bytes


@dataclass(frozen=True)
class Header:
    key: str
    value: str


Piece = Union[NewEntry, Comment, ContentChunk, Header]


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _parse_entry_line(line: bytes) -> NewEntry:
    text = _decode(line[1:]).rstrip("\r\n")
    parts = text.strip().split(None, 1)
    type_string = parts[0] if parts else ""
    id_string = parts[1].strip() if len(parts) > 1 else ""
    return NewEntry(type_string, id_string)


def parse_tef_pieces(lines: Iterable[bytes]) -> Iterator[Piece]:
    """Yield pieces for each line of a TEF document.

    ``lines`` is anything that yields byte lines with their endings kept,
    e.g. a binary file object.
    """
    in_headers = False
    seen_entry = False
    pending: Header | None = None

    for line in lines:
        stripped = line.rstrip(b"\r\n")

        if stripped.startswith(b"=") and not stripped.startswith(b"=="):
            if pending:
                yield pending
                pending = None
            yield _parse_entry_line(stripped)
            seen_entry = True
            in_headers = True
            continue

        if in_headers:
            if not stripped.strip():
                if pending:
                    yield pending
                    pending = None
                in_headers = False
                continue
            if stripped.startswith(b"#"):
                if pending:
                    yield pending
                    pending = None
                yield Comment(_decode(stripped[1:]))
                continue
            if pending and stripped[:1] in (b" ", b"\t"):
                # Continuation of the previous header value
                pending = Header(pending.key, f"{pending.value} {_decode(stripped).strip()}")
                continue
            m = HEADER_RE.match(stripped)
            if m:
                if pending:
                    yield pending
                pending = Header(_decode(m.group(1)).strip(), _decode(m.group(2)).strip())
                continue
            if pending:
                yield pending
                pending = None
            in_headers = False
            # Falls through: this line starts the content section

        if not seen_entry:
            if stripped.startswith(b"#"):
                yield Comment(_decode(stripped[1:]))
                continue
            if not stripped.strip():
                continue

        if stripped.startswith(b"=="):
            yield ContentChunk(line[1:])
        else:
            yield ContentChunk(line)

    if pending:
        yield pending
