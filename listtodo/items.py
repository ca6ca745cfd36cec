"""Project raw entries into flat items and collect them by ID."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from listtodo.entries import RawEntry, pieces_to_entries
from listtodo.phrases import PhraseTranslator
from listtodo.tef import Piece

log = logging.getLogger(__name__)

# Field name -> value. Values are never empty strings. Always-recognized
# fields: idString, typeString, title, subtaskOf, dependsOn, description,
# status; any other header becomes a field too.
Item = dict[str, str]

# "FOO-1 - some title", "FOO-1 # some title", "FOO-1 some title"
ID_TITLE_RE = re.compile(r'^\s*(\S+)\s+(?:[-#]\s+)?(.*)$')


def split_id_and_title(id_line: str) -> tuple[str, str]:
    """Split a raw ID line into ``(id, title)``; title may be empty."""
    m = ID_TITLE_RE.match(id_line)
    if m:
        return m.group(1), m.group(2).strip()
    return id_line.strip(), ""


def entry_to_item(entry: RawEntry, translator: PhraseTranslator) -> Item:
    item: Item = {}

    id_string, title = split_id_and_title(entry.id_string)
    type_string = entry.type_string.strip()
    if id_string:
        item["idString"] = id_string
    if title:
        item["title"] = title
    if type_string:
        item["typeString"] = type_string

    for key, value in entry.headers:
        phrase = translator.register_dashed(key.strip())
        field_name = phrase.compact
        value = value.strip()
        if not value:
            continue
        if field_name in item:
            item[field_name] += "\n" + value
        else:
            item[field_name] = value

    body = b"".join(entry.content_chunks)
    if body:
        item["description"] = body.decode("utf-8", errors="replace")

    return item


def load_items(pieces: Iterable[Piece], translator: PhraseTranslator) -> dict[str, Item]:
    """Build the item collection from a piece stream.

    Entries without an ID cannot be referenced and are skipped. When two
    entries share an ID the later one replaces the earlier.
    """
    items: dict[str, Item] = {}
    for entry in pieces_to_entries(pieces):
        item = entry_to_item(entry, translator)
        item_id = item.get("idString")
        if not item_id:
            log.debug("Skipping entry without an ID (type=%r)", entry.type_string)
            continue
        if item_id in items:
            log.warning("Duplicate item ID %s; later entry replaces earlier one", item_id)
        items[item_id] = item
    return items
