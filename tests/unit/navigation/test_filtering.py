"""Column filtering, clamping, and selection resolution tests."""

from __future__ import annotations

import unittest

from arcnav.navigation import ColumnState, clamp_index, filtered_nodes, node_matches_filter, selected_node
from arcnav.node_cache import NodeCache, NodeKind

from navigation_fakes import LOTS_LAYER, OWNERS_TABLE, PARCELS, PARCELS_LAYER, server_tree


class FilteringTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cache = NodeCache()
        self.cache.upsert_nodes(server_tree()[PARCELS], parent_id=PARCELS)
        self.column = ColumnState(parent_id=PARCELS, nodes=[PARCELS_LAYER, LOTS_LAYER, OWNERS_TABLE])

    def test_empty_filter_returns_all_in_order(self) -> None:
        ids = [node.id for node in filtered_nodes(self.column, self.cache)]
        self.assertEqual(ids, [PARCELS_LAYER, LOTS_LAYER, OWNERS_TABLE])

    def test_filter_matches_kind_tag(self) -> None:
        self.column.filter = "lay"
        names = [node.name for node in filtered_nodes(self.column, self.cache)]
        self.assertEqual(names, ["Parcels", "Lots"])

    def test_filter_matches_name_case_insensitively(self) -> None:
        self.column.filter = "OWN"
        names = [node.name for node in filtered_nodes(self.column, self.cache)]
        self.assertEqual(names, ["Owners"])

    def test_filter_does_not_mutate_column_nodes(self) -> None:
        self.column.filter = "zzz"
        self.assertEqual(filtered_nodes(self.column, self.cache), [])
        self.assertEqual(len(self.column.nodes), 3)

    def test_unresolved_ids_are_dropped(self) -> None:
        self.column.nodes = [PARCELS_LAYER, "ghost"]
        ids = [node.id for node in filtered_nodes(self.column, self.cache)]
        self.assertEqual(ids, [PARCELS_LAYER])

    def test_node_matches_filter_expects_folded_query(self) -> None:
        node = self.cache.get_node(OWNERS_TABLE)
        self.assertTrue(node_matches_filter(node, "table"))
        self.assertFalse(node_matches_filter(node, "layer"))
        self.assertIs(node.kind, NodeKind.TABLE)


class ClampTests(unittest.TestCase):
    def test_clamp_bounds(self) -> None:
        self.assertEqual(clamp_index(-3, 4), 0)
        self.assertEqual(clamp_index(9, 4), 3)
        self.assertEqual(clamp_index(2, 4), 2)

    def test_empty_count_pins_to_zero(self) -> None:
        self.assertEqual(clamp_index(5, 0), 0)


class SelectedNodeTests(unittest.TestCase):
    def test_selection_resolves_against_filtered_view(self) -> None:
        cache = NodeCache()
        cache.upsert_nodes(server_tree()[PARCELS])
        column = ColumnState(nodes=[PARCELS_LAYER, LOTS_LAYER, OWNERS_TABLE], filter="own", selected_index=0)

        self.assertEqual(selected_node(column, cache).id, OWNERS_TABLE)

    def test_out_of_range_selection_is_clamped(self) -> None:
        cache = NodeCache()
        cache.upsert_nodes(server_tree()[PARCELS])
        column = ColumnState(nodes=[PARCELS_LAYER, LOTS_LAYER], selected_index=7)

        self.assertEqual(selected_node(column, cache).id, LOTS_LAYER)

    def test_empty_column_has_no_selection(self) -> None:
        self.assertIsNone(selected_node(ColumnState(), NodeCache()))


if __name__ == "__main__":
    unittest.main()
