"""Choose which items to output."""

from __future__ import annotations

import logging
import random
from typing import Iterable

from listtodo.graph import ItemGraph

log = logging.getLogger(__name__)

SELECT_ALL = "all"
SELECT_SHOVEL_READY = "shovel-ready"
SELECT_RANDOM_TASK = "random-shovel-ready-task"

SELECTION_MODES = (SELECT_ALL, SELECT_SHOVEL_READY, SELECT_RANDOM_TASK)

# Older spellings still accepted on the command line
SELECTION_ALIASES = {
    "incomplete": SELECT_SHOVEL_READY,
    "random-todo-task": SELECT_RANDOM_TASK,
}


class EmptySelection(Exception):
    """Random-task mode found nothing eligible to pick from."""


def normalize_selection_mode(name: str) -> str:
    """Resolve aliases; raises ValueError for unknown modes."""
    mode = SELECTION_ALIASES.get(name, name)
    if mode not in SELECTION_MODES:
        raise ValueError(
            f"unrecognized selection mode '{name}' "
            f"(expected one of: {', '.join(SELECTION_MODES)})"
        )
    return mode


def shovel_ready_ids(graph: ItemGraph, types: Iterable[str] | None = None) -> list[str]:
    """Shovel-ready item IDs in collection order, optionally filtered by type."""
    wanted = set(types) if types is not None else None
    ids = []
    for item_id, item in graph.items.items():
        if wanted is not None and item.get("typeString") not in wanted:
            continue
        if graph.is_shovel_ready(item_id):
            ids.append(item_id)
    return ids


def select_item_ids(
    graph: ItemGraph,
    mode: str,
    eligible_types: Iterable[str] = ("task",),
    rng: random.Random | None = None,
) -> list[str]:
    """Return the IDs to output for ``mode``, in output order.

    In random-task mode the result is the picked task preceded by its
    ancestor chain, so the task is shown in context.
    """
    mode = normalize_selection_mode(mode)

    if mode == SELECT_ALL:
        return list(graph.items)
    if mode == SELECT_SHOVEL_READY:
        return shovel_ready_ids(graph)

    candidates = shovel_ready_ids(graph, eligible_types)
    if not candidates:
        raise EmptySelection("No shovel-ready tasks loaded; can't pick a random item from an empty list")

    rng = rng or random.Random()
    rng.shuffle(candidates)
    picked = candidates[0]
    log.debug("Picked %s out of %d shovel-ready task(s)", picked, len(candidates))
    return graph.collect_with_ancestors(picked)
