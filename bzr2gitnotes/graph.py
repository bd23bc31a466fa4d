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

"""The commit graph built while reading a bzr fast-export stream.

Commits are kept in an arena keyed by their mark.  Every edge (chain parent,
chain children, merge parents, merge target) is stored as a mark, never as a
reference to another Commit.
"""

from . import errors
from .trace import mutter


class Commit(object):
    """A commit read from the stream.

    :ivar id: the mark of the commit
    :ivar ref: the ref named by the commit command
    :ivar nick: the branch nick from the branch-nick property, or None
    :ivar nick_id: the id paired with the nick
    :ivar parent: mark of the chain parent (``from``), or None
    :ivar children: marks of the commits whose chain parent this is
    :ivar merge_parents: marks merged into this commit
    :ivar merge_target: mark of the commit this one was merged into
    :ivar authors: raw author identities, in stream order
    :ivar bug: the bugs property value, or None
    :ivar tags: names of tags anchored here
    :ivar branch: the Branch owning this commit, set once by build_branches
    :ivar revision: the dotted revision number, set once by number_revisions
    """

    def __init__(self, ref=None, id=None):
        self.id = id
        self.ref = ref
        self.nick = None
        self.nick_id = None
        self.parent = None
        self.children = []
        self.merge_parents = []
        self.merge_target = None
        self.authors = []
        self.bug = None
        self.tags = []
        self.branch = None
        self.revision = None

    def __repr__(self):
        return "<%s :%s %s>" % (self.__class__.__name__, self.id, self.name)

    @property
    def name(self):
        """The branch name this commit was made on."""
        if self.nick is None:
            if self.ref is None:
                return None
            return self.ref.decode("utf-8", "replace")
        return "%s-%d" % (self.nick.decode("utf-8", "replace"), self.nick_id)

    def is_fork_point(self):
        """Whether one or more branches start from this commit."""
        return len(self.children) > 1

    def is_merge_point(self):
        """Whether one or more branches were merged into this commit."""
        return len(self.merge_parents) > 0

    def is_tip(self):
        """Whether this commit is the last one of a branch."""
        return len(self.children) == 0

    def set_branch(self, branch):
        if self.branch is not None:
            raise errors.BranchAlreadyAssigned(self.id, self.branch.name)
        self.branch = branch

    def set_revision(self, base_revno, rank=0, position=0):
        """Set the revision number, which can only be done once.

        Trunk commits get a plain number, branch commits the dotted form
        ``base.rank.position``.
        """
        if rank == 0 and position == 0:
            revision = "%d" % (base_revno,)
        else:
            revision = "%d.%d.%d" % (base_revno, rank, position)
        if self.revision is not None:
            raise errors.RevisionAlreadySet(self.id, self.revision, revision)
        self.revision = revision


class Tag(object):

    def __init__(self, name, skip=False):
        self.name = name
        self.anchor = None
        self.skip = skip

    def __repr__(self):
        return "<%s %r -> %s>" % (self.__class__.__name__, self.name,
            self.anchor)


class CommitGraph(object):
    """All commits read so far, in stream order."""

    def __init__(self):
        self._commits = {}
        self._order = []

    def __len__(self):
        return len(self._order)

    def __iter__(self):
        for mark in self._order:
            yield self._commits[mark]

    def __contains__(self, mark):
        return mark in self._commits

    def __getitem__(self, mark):
        return self._commits[mark]

    def get(self, mark, lineno=0, section="from"):
        """Look up a commit by mark.

        :raises UnknownMark: if no commit has that mark
        """
        try:
            return self._commits[mark]
        except KeyError:
            raise errors.UnknownMark(lineno, section, mark)

    def first(self):
        if not self._order:
            return None
        return self._commits[self._order[0]]

    def last(self):
        if not self._order:
            return None
        return self._commits[self._order[-1]]

    def max_mark(self):
        if not self._order:
            return 0
        return max(self._order)

    def add(self, commit, lineno=0):
        """Add a finished commit to the graph."""
        if commit.id in self._commits:
            raise errors.DuplicateMark(lineno, commit.id)
        self._commits[commit.id] = commit
        self._order.append(commit.id)

    def parent(self, commit):
        """The chain parent of commit, or None for a root."""
        if commit.parent is None:
            return None
        return self._commits[commit.parent]

    def link_parent(self, commit, mark, lineno=0):
        """Record mark as the chain parent of commit."""
        parent = self.get(mark, lineno, "from")
        commit.parent = parent.id
        parent.children.append(commit.id)
        return parent

    def link_merge(self, commit, mark, lineno=0):
        """Record mark as merged into commit."""
        merged = self.get(mark, lineno, "merge")
        commit.merge_parents.append(merged.id)
        if merged.merge_target is not None:
            mutter("commit :%d merged into both :%d and :%d, keeping :%d",
                merged.id, merged.merge_target, commit.id,
                merged.merge_target)
        else:
            merged.merge_target = commit.id
        return merged

    def iter_ancestry(self, commit):
        """Walk the chain parents from commit back to its root."""
        while commit is not None:
            yield commit
            commit = self.parent(commit)
