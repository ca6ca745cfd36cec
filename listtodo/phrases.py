"""Header-name phrase translation.

A phrase has three spellings that all resolve to the same record::

    "subtask of"  <->  "subtaskOf"  <->  "subtask-of"

Item fields are keyed by the compact spelling; TEF headers and pretty output
use the dashed one.
"""

from __future__ import annotations

from typing import NamedTuple

# Fields every translator knows about before any header is seen
WELL_KNOWN_PHRASES = (
    "id string",
    "type string",
    "title",
    "subtask of",
    "depends on",
    "description",
    "status",
)


class UnknownPhrase(LookupError):
    """Raised when looking up a phrase that was never registered."""


class Phrase(NamedTuple):
    english: str
    compact: str
    dashed: str


class PhraseTranslator:
    """Append-only cache mapping every spelling of a phrase to its record.

    The first registration of a phrase wins; registering it again, in any
    spelling, changes nothing.
    """

    def __init__(self, seed: tuple[str, ...] = WELL_KNOWN_PHRASES) -> None:
        self._phrases: dict[str, Phrase] = {}
        for english in seed:
            self.register(english)

    def __len__(self) -> int:
        return len(set(self._phrases.values()))

    def __contains__(self, key: str) -> bool:
        return key in self._phrases

    def register(self, english: str) -> Phrase:
        existing = self._phrases.get(english)
        if existing is not None:
            return existing

        words = []
        for word in english.split(" "):
            word = word.lower()
            words.append("email" if word == "e-mail" else word)

        compact = words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])
        dashed = "-".join(words)
        phrase = Phrase(english, compact, dashed)
        for key in (english, compact, dashed):
            self._phrases.setdefault(key, phrase)
        return phrase

    def register_dashed(self, dashed: str) -> Phrase:
        return self.register(dashed.replace("-", " "))

    def lookup(self, key: str) -> Phrase:
        try:
            return self._phrases[key]
        except KeyError:
            raise UnknownPhrase(f'"{key}" is not in the phrase database') from None

    def to_compact_form(self, key: str) -> str:
        return self.lookup(key).compact

    def to_dash_form(self, key: str) -> str:
        return self.lookup(key).dashed
