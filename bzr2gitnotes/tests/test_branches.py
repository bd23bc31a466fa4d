# Copyright (C) 2026 bzr2gitnotes developers
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA

"""Test the recovery of branches"""

from testtools import TestCase

from .. import errors
from ..branches import (
    Branch,
    build_branches,
    resolve_branch_levels,
    )
from ..graph import CommitGraph
from . import make_graph


class TestBranchLevels(TestCase):

    def test_empty(self):
        self.assertEqual({}, resolve_branch_levels(CommitGraph()))

    def test_trunk_names(self):
        graph = make_graph(
            (1, b"HEAD", None, []),
            (2, b"trunk", 1, []),
            (3, b"trunk", 2, []),
            )
        self.assertEqual({"HEAD-4": 1, "trunk-5": 1},
            resolve_branch_levels(graph))

    def test_fork_point_newest_first(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"a", 1, []),
            (3, b"b", 1, []),
            (4, b"trunk", 1, [3]),
            (5, b"trunk", 4, [2]),
            )
        self.assertEqual({"trunk-5": 1, "b-1": 2, "a-1": 3},
            resolve_branch_levels(graph))

    def test_nested_fork_point(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"a", 1, []),
            (3, b"b", 2, []),
            (4, b"a", 2, [3]),
            (5, b"trunk", 1, [4]),
            )
        self.assertEqual({"trunk-5": 1, "a-1": 2, "b-1": 3},
            resolve_branch_levels(graph))

    def test_renamed_branch(self):
        # the nick changed from 'squid-autoconf-refactor' to
        # 'autoconf-refactor' in the middle of the branch
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"trunk", 1, []),
            (3, b"squid-autoconf-refactor", 1, []),
            (4, b"autoconf-refactor", 3, []),
            (5, b"trunk", 2, [4]),
            )
        self.assertEqual({"trunk-5": 1, "squid-autoconf-refactor-23": 2,
            "autoconf-refactor-17": 2}, resolve_branch_levels(graph))

    def test_duplicated_branch_name(self):
        # an auxiliary 'trunk' forked from the genuine one
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"trunk", 1, []),
            (3, b"trunk", 1, []),
            (4, b"trunk", 2, [3]),
            )
        self.assertEqual({"trunk-5": 1}, resolve_branch_levels(graph))


class TestBuildBranches(TestCase):

    def test_empty(self):
        self.assertEqual(None, build_branches(CommitGraph()))

    def test_linear(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"trunk", 1, []),
            (3, b"trunk", 2, []),
            )
        tree = build_branches(graph)
        trunk = tree.trunk
        self.assertTrue(trunk.is_trunk)
        self.assertEqual((1, 3, 3), (trunk.begin, trunk.end, trunk.node_count))
        self.assertEqual([trunk], tree.branches)
        for commit in graph:
            self.assertIs(trunk, commit.branch)

    def test_merged_branch(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"trunk", 1, []),
            (3, b"trunk", 2, []),
            (4, b"feature", 2, []),
            (5, b"trunk", 3, [4]),
            )
        tree = build_branches(graph)
        self.assertEqual(2, len(tree))
        feature = tree.branches[1]
        self.assertEqual("feature-7", feature.name)
        self.assertEqual((4, 4, 2, 1), (feature.begin, feature.end,
            feature.fork_point, feature.node_count))
        self.assertIs(tree.trunk, feature.parent)
        self.assertEqual([feature], tree.trunk.children)
        self.assertEqual([feature], tree.derived_from(2))
        self.assertEqual([], tree.derived_from(3))
        self.assertEqual(4, tree.trunk.node_count)
        self.assertIs(feature, graph[4].branch)

    def test_unmerged_branch_ignored(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"feature", 1, []),
            (3, b"trunk", 1, []),
            )
        tree = build_branches(graph)
        self.assertEqual([tree.trunk], tree.branches)
        self.assertEqual(2, tree.trunk.node_count)
        self.assertEqual(None, graph[2].branch)

    def test_last_merge_of_branch(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"feature", 1, []),
            (3, b"trunk", 1, [2]),
            (4, b"feature", 2, []),
            (5, b"trunk", 3, [4]),
            )
        tree = build_branches(graph)
        feature = tree.branches[1]
        self.assertEqual((2, 4, 2), (feature.begin, feature.end,
            feature.node_count))
        self.assertEqual(2, len(tree))

    def test_merge_from_parent_branch(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"feature", 1, []),
            (3, b"trunk", 1, []),
            (4, b"feature", 2, [3]),
            (5, b"trunk", 3, [4]),
            )
        tree = build_branches(graph)
        feature = tree.branches[1]
        self.assertEqual((2, 4, 2), (feature.begin, feature.end,
            feature.node_count))
        self.assertIs(tree.trunk, graph[3].branch)

    def test_nested_branch(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"trunk", 1, []),
            (3, b"a", 1, []),
            (4, b"b", 3, []),
            (5, b"a", 3, [4]),
            (6, b"trunk", 2, [5]),
            )
        tree = build_branches(graph)
        self.assertEqual(["trunk-5", "a-1", "b-1"],
            [b.name for b in tree.branches])
        trunk, a, b = tree.branches
        self.assertEqual([a], trunk.children)
        self.assertEqual([b], a.children)
        self.assertIs(a, b.parent)
        self.assertEqual((3, 1, 2), (a.begin, a.fork_point, a.node_count))
        self.assertEqual((4, 3, 1), (b.begin, b.fork_point, b.node_count))
        self.assertEqual([trunk, a, b], list(trunk.iter_nested()))

    def test_early_merged_branch_first(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"a", 1, []),
            (3, b"b", 1, []),
            (4, b"trunk", 1, [3]),
            (5, b"trunk", 4, [2]),
            )
        tree = build_branches(graph)
        self.assertEqual(["trunk-5", "b-1", "a-1"],
            [b.name for b in tree.branches])
        self.assertEqual(["b-1", "a-1"],
            [b.name for b in tree.derived_from(1)])

    def test_duplicated_branch_name(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"trunk", 1, []),
            (3, b"trunk", 1, []),
            (4, b"trunk", 2, [3]),
            )
        tree = build_branches(graph)
        aux = tree.branches[1]
        self.assertFalse(aux.is_trunk)
        self.assertEqual((3, 1), (aux.begin, aux.fork_point))

    def test_merged_root(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"other", None, []),
            (3, b"trunk", 1, [2]),
            )
        e = self.assertRaises(errors.BrokenChain, build_branches, graph)
        self.assertEqual(2, e.mark)

    def test_trunk_not_reaching_first(self):
        graph = make_graph(
            (1, b"trunk", None, []),
            (2, b"trunk", None, []),
            )
        self.assertRaises(errors.BrokenChain, build_branches, graph)


class TestBranch(TestCase):

    def test_iter_nested_order(self):
        trunk = Branch(10, "trunk-5", is_trunk=True)
        a = Branch(8, "a-1")
        b = Branch(9, "b-1")
        c = Branch(7, "c-1")
        trunk.add_child(a)
        trunk.add_child(b)
        a.add_child(c)
        self.assertEqual([trunk, a, c, b], list(trunk.iter_nested()))
        self.assertIs(a, c.parent)
