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

"""bzr style revision numbers.

Trunk commits are numbered 1, 2, 3, ... from the first commit.  A commit on
any other branch gets ``N.R.P``: N is the trunk revno the branch (or the
branch it is nested in) forked from, R ranks the branches forked at N by
their first commit and P is the position in the branch, counting from 1.
"""

from . import errors
from .trace import mutter


def number_revisions(graph, tree):
    """Set the revision of every commit claimed by a branch of tree.

    :param graph: a CommitGraph
    :param tree: the BranchTree build_branches returned for graph
    """
    if tree is None:
        return
    trunk = tree.trunk
    revno = trunk.node_count
    commit = graph[trunk.end]
    previous = None
    while commit is not None:
        commit.set_revision(revno)
        if commit.is_fork_point():
            _number_derived(graph, tree.derived_from(commit.id), revno)
        revno -= 1
        previous = commit
        commit = graph.parent(commit)
    if revno != 0:
        raise errors.RevisionCountMismatch(trunk.name, previous.id, revno + 1)


def _number_derived(graph, derived, trunk_revno):
    """Number all branches started at the trunk commit trunk_revno.

    Branches nested in those branches are numbered here too, ranked together
    with them by their first commit.
    """
    by_begin = {}
    for branch in derived:
        for nested in branch.iter_nested():
            by_begin.setdefault(nested.begin, nested)
    for rank, begin in enumerate(sorted(by_begin), 1):
        branch = by_begin[begin]
        position = branch.node_count
        commit = graph[branch.end]
        while True:
            commit.set_revision(trunk_revno, rank, position)
            position -= 1
            if commit.id == branch.begin:
                break
            commit = graph.parent(commit)
        if position != 0:
            raise errors.RevisionCountMismatch(branch.name, branch.begin,
                position + 1)
        mutter("branch %s numbered %d.%d.1 to %d.%d.%d", branch.name,
            trunk_revno, rank, trunk_revno, rank, branch.node_count)
