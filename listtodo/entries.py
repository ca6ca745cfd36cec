"""Group a TEF piece stream into raw entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from listtodo.tef import Comment, ContentChunk, Header, NewEntry, Piece


@dataclass
class RawEntry:
    """One TEF entry before projection into an item."""

    type_string: str = ""
    id_string: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    content_chunks: list[bytes] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.type_string or self.id_string or self.headers or self.content_chunks)


def pieces_to_entries(pieces: Iterable[Piece]) -> Iterator[RawEntry]:
    """Yield one RawEntry per entry in ``pieces``.

    Single pass. The pending entry is flushed both when the next entry
    starts and when the stream ends, so the last entry is never lost.
    Empty entries (e.g. a file with only comments) are never yielded.
    """
    current = RawEntry()

    for piece in pieces:
        if isinstance(piece, NewEntry):
            if not current.is_empty():
                yield current
                current = RawEntry()
            current.type_string = piece.type_string
            current.id_string = piece.id_string
        elif isinstance(piece, Comment):
            continue
        elif isinstance(piece, ContentChunk):
            current.content_chunks.append(piece.data)
        elif isinstance(piece, Header):
            current.headers.append((piece.key, piece.value))
        else:
            raise TypeError(f"Unexpected TEF piece: {piece!r}")

    if not current.is_empty():
        yield current
