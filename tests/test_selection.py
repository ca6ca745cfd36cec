"""Tests for listtodo.selection."""

from __future__ import annotations

import random

import pytest

from listtodo.graph import ItemGraph, UnknownReference
from listtodo.items import Item
from listtodo.selection import (
    SELECT_ALL,
    SELECT_RANDOM_TASK,
    SELECT_SHOVEL_READY,
    EmptySelection,
    normalize_selection_mode,
    select_item_ids,
    shovel_ready_ids,
)


def make_graph(*items: Item) -> ItemGraph:
    return ItemGraph({item["idString"]: item for item in items})


@pytest.fixture
def graph() -> ItemGraph:
    return make_graph(
        {"idString": "PROJ", "typeString": "project", "status": "todo"},
        {"idString": "T1", "typeString": "task", "subtaskOf": "PROJ", "dependsOn": "T0"},
        {"idString": "T0", "typeString": "task", "status": "done"},
        {"idString": "T2", "typeString": "task", "dependsOn": "T1"},
        {"idString": "IDEA", "typeString": "idea"},
    )


class TestNormalizeSelectionMode:
    @pytest.mark.parametrize("name", [SELECT_ALL, SELECT_SHOVEL_READY, SELECT_RANDOM_TASK])
    def test_canonical(self, name: str) -> None:
        assert normalize_selection_mode(name) == name

    def test_aliases(self) -> None:
        assert normalize_selection_mode("incomplete") == SELECT_SHOVEL_READY
        assert normalize_selection_mode("random-todo-task") == SELECT_RANDOM_TASK

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="unrecognized selection mode 'bogus'"):
            normalize_selection_mode("bogus")


class TestShovelReadyIds:
    def test_collection_order(self, graph: ItemGraph) -> None:
        assert shovel_ready_ids(graph) == ["PROJ", "T1", "IDEA"]

    def test_type_filter(self, graph: ItemGraph) -> None:
        assert shovel_ready_ids(graph, ["task"]) == ["T1"]


class TestSelectItemIds:
    def test_all(self, graph: ItemGraph) -> None:
        assert select_item_ids(graph, SELECT_ALL) == ["PROJ", "T1", "T0", "T2", "IDEA"]

    def test_shovel_ready(self, graph: ItemGraph) -> None:
        assert select_item_ids(graph, SELECT_SHOVEL_READY) == ["PROJ", "T1", "IDEA"]

    def test_alias_accepted(self, graph: ItemGraph) -> None:
        assert select_item_ids(graph, "incomplete") == ["PROJ", "T1", "IDEA"]

    def test_random_task_includes_ancestors(self, graph: ItemGraph) -> None:
        # T1 is the only shovel-ready task
        assert select_item_ids(graph, SELECT_RANDOM_TASK) == ["PROJ", "T1"]

    def test_random_task_picks_among_candidates(self) -> None:
        graph = make_graph(
            {"idString": "A", "typeString": "task"},
            {"idString": "B", "typeString": "task"},
            {"idString": "C", "typeString": "task"},
        )
        picks = {
            tuple(select_item_ids(graph, SELECT_RANDOM_TASK, rng=random.Random(seed)))
            for seed in range(50)
        }
        assert picks <= {("A",), ("B",), ("C",)}
        assert len(picks) > 1

    def test_random_task_respects_eligible_types(self, graph: ItemGraph) -> None:
        assert select_item_ids(graph, SELECT_RANDOM_TASK, eligible_types=["idea"]) == ["IDEA"]

    def test_random_task_empty_selection(self) -> None:
        graph = make_graph(
            {"idString": "P", "typeString": "project"},
            {"idString": "DONE", "typeString": "task", "status": "done"},
        )
        with pytest.raises(EmptySelection):
            select_item_ids(graph, SELECT_RANDOM_TASK)

    def test_random_task_empty_collection(self) -> None:
        with pytest.raises(EmptySelection):
            select_item_ids(ItemGraph({}), SELECT_RANDOM_TASK)

    def test_unknown_reference_propagates(self) -> None:
        graph = make_graph({"idString": "A", "typeString": "task", "dependsOn": "GHOST"})
        with pytest.raises(UnknownReference):
            select_item_ids(graph, SELECT_SHOVEL_READY)
