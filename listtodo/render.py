"""Output formats: JSON lines and a pretty, coloured listing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Sequence

import click
from jinja2 import Environment, FileSystemLoader

from listtodo.items import Item
from listtodo.phrases import PhraseTranslator

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

OUTPUT_FORMATS = ("json", "pretty")

# Shown in the heading line rather than as "name: value" fields
HEADING_FIELDS = ("typeString", "idString", "title", "description")

TYPE_COLOR = (0xCC, 0xAA, 0xAA)
ID_COLOR = (0xAA, 0xCC, 0xAA)


def _get_env() -> Environment:
    """Create a Jinja2 environment loading from listtodo/templates/."""
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_json_lines(items: Mapping[str, Item], item_ids: Sequence[str]) -> str:
    """One JSON object per selected item, fields in insertion order."""
    return "".join(json.dumps(items[item_id], ensure_ascii=False) + "\n" for item_id in item_ids)


def format_heading(item: Item) -> str:
    heading = (
        "="
        + click.style(item.get("typeString", "item"), fg=TYPE_COLOR)
        + " "
        + click.style(item.get("idString", ""), fg=ID_COLOR)
    )
    if item.get("title"):
        heading += " - " + click.style(item["title"], fg="bright_white")
    return heading


def format_fields(item: Item, translator: PhraseTranslator) -> list[tuple[str, str]]:
    """``(dash-name, value)`` pairs for every non-heading field.

    Multi-line values (repeated headers) are flattened onto one line.
    """
    return [
        (translator.to_dash_form(key), value.replace("\n", ", "))
        for key, value in item.items()
        if key not in HEADING_FIELDS
    ]


def _item_context(item: Item, translator: PhraseTranslator) -> dict[str, Any]:
    description = item.get("description")
    return {
        "heading": format_heading(item),
        "fields": format_fields(item, translator),
        "description": description.strip() if description is not None else None,
    }


def render_pretty(
    items: Mapping[str, Item],
    item_ids: Sequence[str],
    translator: PhraseTranslator,
    selection_mode: str,
    separator_width: int = 74,
) -> str:
    env = _get_env()
    template = env.get_template("pretty.txt.j2")
    return template.render(
        banner=click.style("Welcome to list-todo!", fg="yellow"),
        selection_mode=selection_mode,
        separator=click.style("#" * separator_width, fg="bright_black"),
        items=[_item_context(items[item_id], translator) for item_id in item_ids],
    )
