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

"""Recovering bzr branches from the commit graph.

A fast-export stream does not say which branch a commit belongs to, only
which commit it follows and which commits it merges.  Branches are recovered
in two steps:

 * resolve_branch_levels() gives every branch name a nesting level from the
   order in which the names appear.  Level 1 is the trunk; levels only decide
   the order in which branches are walked.

 * build_branches() walks back from the last commit along the chain parents
   to claim the trunk, then from every merged tip to claim the branch that
   was merged, wave after wave, until all reachable commits are claimed.
"""

from . import errors
from .trace import mutter


def resolve_branch_levels(graph):
    """Give every branch name in graph a nesting level.

    :param graph: a CommitGraph
    :return: a dict mapping branch name to level
    """
    levels = {}
    if not len(graph):
        return levels
    # fill all trunk names first (e.g. 'HEAD', 'trunk', 'TRUNK' etc.)
    for commit in graph.iter_ancestry(graph.last()):
        levels.setdefault(commit.name, 1)

    for commit in graph:
        if commit.is_fork_point():
            cur_level = levels.get(commit.name, 1)
            # The most recently created branch is done first
            names = []
            for child_id in sorted(commit.children, reverse=True):
                child = graph[child_id]
                if child.name != commit.name and child.name not in names:
                    names.append(child.name)
            for name in names:
                if name in levels:
                    # Left for build_branches to tell apart by structure
                    mutter("duplicated branch %s", name)
                    continue
                cur_level += 1
                levels[name] = cur_level
        else:
            parent = graph.parent(commit)
            if parent is None or commit.name == parent.name:
                continue
            # The nick changed between two adjacent commits of one branch,
            # e.g. 'squid-autoconf-refactor' became 'autoconf-refactor'.
            if parent.name in levels and commit.name not in levels:
                mutter("renamed branch from %s to %s", parent.name,
                    commit.name)
                # level 1 is for trunk names only
                levels[commit.name] = max(levels[parent.name], 2)
    return levels


class Branch(object):
    """A bzr branch recovered from the graph.

    :ivar end: mark of the last commit owned by the branch
    :ivar begin: mark of the first commit owned by the branch
    :ivar fork_point: mark of the commit the branch started from
    :ivar node_count: number of commits owned, begin and end included
    """

    def __init__(self, end, name, is_trunk=False):
        self.end = end
        self.name = name
        self.is_trunk = is_trunk
        self.begin = None
        self.fork_point = None
        self.parent = None
        self.children = []
        self.node_count = 0

    def __repr__(self):
        return "<%s %s :%s..:%s (%d)>" % (self.__class__.__name__,
            self.name, self.begin, self.end, self.node_count)

    def add_child(self, branch):
        branch.parent = self
        self.children.append(branch)

    def iter_nested(self):
        """Iterate over this branch and every branch nested in it."""
        pending = [self]
        while pending:
            branch = pending.pop()
            yield branch
            pending.extend(reversed(branch.children))


class BranchTree(object):
    """The result of build_branches.

    :ivar trunk: the trunk Branch
    :ivar branches: every Branch, in the order it was walked
    :ivar derived: dict mapping a fork point mark to the branches that
      start there
    """

    def __init__(self, trunk):
        self.trunk = trunk
        self.branches = []
        self.derived = {}

    def __len__(self):
        return len(self.branches)

    def derived_from(self, mark):
        return self.derived.get(mark, [])


def build_branches(graph, levels=None):
    """Partition the commits of graph into branches.

    :param graph: a CommitGraph
    :param levels: the result of resolve_branch_levels
    :return: a BranchTree, or None for an empty graph
    """
    if not len(graph):
        return None
    if levels is None:
        levels = resolve_branch_levels(graph)
    first = graph.first()
    last = graph.last()
    trunk = Branch(last.id, last.name, is_trunk=True)
    trunk.begin = first.id
    first.set_branch(trunk)
    trunk.node_count = 1
    claimed = set([first.id])
    tree = BranchTree(trunk)

    frontiers = [trunk]
    min_level = 1
    while frontiers:
        next_frontiers = []
        spawned = set()
        # process early-merged branches first
        frontiers.reverse()
        by_level = {}
        for branch in frontiers:
            level = max(levels.get(branch.name, min_level), min_level)
            by_level.setdefault(level, []).append(branch)
        for level in sorted(by_level):
            for branch in by_level[level]:
                _walk_branch(graph, tree, branch, claimed, spawned,
                    next_frontiers)
        min_level += 1
        frontiers = next_frontiers
    mutter("found %d branches", len(tree.branches))
    return tree


def _walk_branch(graph, tree, branch, claimed, spawned, next_frontiers):
    """Claim the commits of branch, from its end back to a claimed commit."""
    commit = graph[branch.end]
    previous = None
    while commit.id not in claimed:
        claimed.add(commit.id)
        branch.node_count += 1
        commit.set_branch(branch)
        for merged_id in commit.merge_parents:
            # ignore merges from parent branches (e.g. merge from trunk to
            # a feature branch)
            if merged_id in claimed or merged_id in spawned:
                continue
            merged = graph[merged_id]
            # process only the last merge from a branch
            if not merged.is_tip():
                continue
            spawned.add(merged_id)
            next_frontiers.append(Branch(merged_id, merged.name))
        previous = commit
        commit = graph.parent(commit)
        if commit is None:
            if branch.is_trunk:
                raise errors.BrokenChain(branch.name, previous.id,
                    "the first commit :%d" % (graph.first().id,))
            raise errors.BrokenChain(branch.name, previous.id,
                "a claimed commit")
    if not branch.is_trunk:
        if previous is None:
            # Claimed by another branch of the same wave
            mutter("branch %s ending at :%d already claimed", branch.name,
                branch.end)
            return
        if not commit.is_fork_point():
            raise errors.NotAForkPoint(branch.name, commit.id)
        branch.begin = previous.id
        branch.fork_point = commit.id
        commit.branch.add_child(branch)
        tree.derived.setdefault(commit.id, []).append(branch)
    tree.branches.append(branch)
