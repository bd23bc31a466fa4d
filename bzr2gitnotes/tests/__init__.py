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

"""Tests for bzr2gitnotes."""

from ..graph import (
    Commit,
    CommitGraph,
    )


def make_graph(*specs):
    """Build a CommitGraph from (mark, nick, parent, merges) tuples.

    The tuples are added in order; parent is a mark or None and merges a
    list of marks.  The nick id is the length of the nick, as for a
    branch-nick property.
    """
    graph = CommitGraph()
    for mark, nick, parent, merges in specs:
        commit = Commit(b"refs/heads/master", mark)
        commit.nick = nick
        commit.nick_id = len(nick)
        if parent is not None:
            graph.link_parent(commit, parent)
        for merged in merges:
            graph.link_merge(commit, merged)
        graph.add(commit)
    return graph


def commit_record(mark, nick=b"trunk", parent=None, merges=(), message=b"m",
                  authors=(b"Joe <joe@example.com> 1234567890 +0000",),
                  bugs=None, files=()):
    """Build the bzr fast-export text of one commit."""
    lines = [b"commit refs/heads/master", b"mark :%d" % (mark,)]
    for who in authors:
        lines.append(b"author " + who)
    lines.append(b"committer Joe <joe@example.com> 1234567890 +0000")
    lines.append(b"data %d" % (len(message),))
    lines.append(message)
    if parent is not None:
        lines.append(b"from :%d" % (parent,))
    for merged in merges:
        lines.append(b"merge :%d" % (merged,))
    lines.append(b"property branch-nick %d %s" % (len(nick), nick))
    if bugs is not None:
        lines.append(b"property bugs %d %s" % (len(bugs), bugs))
    lines.extend(files)
    return b"".join(line + b"\n" for line in lines)
