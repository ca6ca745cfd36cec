"""Status and dependency resolution over the item collection.

Items reference each other through two ID-list fields:

- ``subtaskOf`` names parents. An item without an explicit live/dead status
  inherits activity from them: active if any parent is active, inactive if
  it has parents and none are.
- ``dependsOn`` names prerequisites. An active item is *shovel-ready* once
  every prerequisite has status ``done``.

References are only checked when dereferenced. A missing ID is fatal
(``UnknownReference``), as is a ``subtaskOf`` cycle (``CyclicRelation``).
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Iterable, Mapping

from listtodo.items import Item

log = logging.getLogger(__name__)

ACTIVE_STATUSES = ("todo", "in-progress")
INACTIVE_STATUSES = ("done", "cancelled", "tabled")
DONE_STATUS = "done"

ID_LIST_SPLIT_RE = re.compile(r'[,\s]+')

# "done ; finished early", "in-progress (since monday)", "tabled #later"
STATUS_TOKEN_RE = re.compile(r'^[\w-]+')


class Liveness(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    INDETERMINATE = "indeterminate"


class ResolutionError(Exception):
    """Fatal problem with the item graph."""


class UnknownReference(ResolutionError):
    """An item ID that is not in the collection was dereferenced."""

    def __init__(self, missing_id: str, referenced_by: str | None = None) -> None:
        self.missing_id = missing_id
        self.referenced_by = referenced_by
        if referenced_by:
            msg = f"Item {missing_id}, referenced by {referenced_by}, not found"
        else:
            msg = f"Item {missing_id} not found"
        super().__init__(msg)


class CyclicRelation(ResolutionError):
    """``subtaskOf`` links loop back onto an item already being visited."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__("Cyclic subtask-of relation: " + " -> ".join(cycle))


def id_list_from(value: str | None) -> list[str]:
    """Parse a comma and/or whitespace separated ID list."""
    if not value:
        return []
    return [part for part in ID_LIST_SPLIT_RE.split(value) if part]


def parse_status_token(status: str | None) -> str | None:
    """Return the status keyword, ignoring any trailing commentary."""
    if not status:
        return None
    m = STATUS_TOKEN_RE.match(status.strip())
    return m.group(0) if m else None


class ItemGraph:
    """Read-only queries against a fully loaded item collection.

    Activity is memoized per instance, so each unrecognized status is
    reported once no matter how many descendants consult it.

    Parameters
    ----------
    items:
        Mapping of item ID to item. Not modified.
    active_statuses, inactive_statuses:
        Status keywords that explicitly mark an item live or finished.
        ``done`` must be among the inactive ones.
    """

    def __init__(
        self,
        items: Mapping[str, Item],
        active_statuses: Iterable[str] = ACTIVE_STATUSES,
        inactive_statuses: Iterable[str] = INACTIVE_STATUSES,
    ) -> None:
        self.items = items
        self._active_statuses = frozenset(active_statuses)
        self._inactive_statuses = frozenset(inactive_statuses)
        self._active_cache: dict[str, bool] = {}
        self._warned_status: set[str] = set()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, item_id: str, referenced_by: str | None = None) -> Item:
        try:
            return self.items[item_id]
        except KeyError:
            raise UnknownReference(item_id, referenced_by) from None

    def parent_ids(self, item_id: str) -> list[str]:
        return id_list_from(self.get(item_id).get("subtaskOf"))

    def dependency_ids(self, item_id: str) -> list[str]:
        return id_list_from(self.get(item_id).get("dependsOn"))

    def status_token(self, item_id: str) -> str | None:
        return parse_status_token(self.get(item_id).get("status"))

    def liveness(self, item_id: str) -> Liveness:
        """Liveness from the item's own status alone."""
        token = self.status_token(item_id)
        if token is None:
            return Liveness.INDETERMINATE
        if token in self._active_statuses:
            return Liveness.ACTIVE
        if token in self._inactive_statuses:
            return Liveness.INACTIVE
        if item_id not in self._warned_status:
            self._warned_status.add(item_id)
            log.warning("Item %s has unrecognized status %r", item_id, token)
        return Liveness.INDETERMINATE

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def is_active(self, item_id: str) -> bool:
        return self._is_active(item_id, [])

    def _is_active(self, item_id: str, path: list[str]) -> bool:
        cached = self._active_cache.get(item_id)
        if cached is not None:
            return cached
        if item_id in path:
            raise CyclicRelation(path[path.index(item_id):] + [item_id])

        own = self.liveness(item_id)
        if own is Liveness.ACTIVE:
            result = True
        elif own is Liveness.INACTIVE:
            result = False
        else:
            parents = self.parent_ids(item_id)
            if not parents:
                result = True
            else:
                # Every parent must exist, even those after the first active one
                for parent_id in parents:
                    self.get(parent_id, referenced_by=item_id)
                path.append(item_id)
                result = False
                for parent_id in parents:
                    if self._is_active(parent_id, path):
                        result = True
                        break
                path.pop()

        self._active_cache[item_id] = result
        return result

    def is_done(self, item_id: str) -> bool:
        return self.status_token(item_id) == DONE_STATUS

    def is_shovel_ready(self, item_id: str) -> bool:
        """Active, and every dependency is explicitly done."""
        if not self.is_active(item_id):
            return False

        for dep_id in self.dependency_ids(item_id):
            self.get(dep_id, referenced_by=item_id)
            if self.is_done(dep_id):
                continue
            if not self.is_active(dep_id):
                log.warning(
                    "Item %s depends on %s, which is inactive (status %r) but not done",
                    item_id, dep_id, self.status_token(dep_id),
                )
            return False

        return True

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def collect_with_ancestors(self, item_id: str) -> list[str]:
        """Return every ancestor of ``item_id`` followed by the item itself.

        Depth-first over ``subtaskOf`` in listed order. Ancestors shared
        through several paths appear once per path.
        """
        into: list[str] = []
        self._collect(item_id, None, [], into)
        return into

    def _collect(
        self,
        item_id: str,
        referenced_by: str | None,
        path: list[str],
        into: list[str],
    ) -> None:
        if item_id in path:
            raise CyclicRelation(path[path.index(item_id):] + [item_id])
        item = self.get(item_id, referenced_by=referenced_by)

        path.append(item_id)
        for parent_id in id_list_from(item.get("subtaskOf")):
            self._collect(parent_id, item_id, path, into)
        path.pop()

        into.append(item_id)
