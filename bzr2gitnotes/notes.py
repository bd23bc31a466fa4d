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

"""Writing bzr metadata as git notes.

git has no place for extra authors, bug links or bzr revision numbers, so
each commit carrying any of them gets a note:

  Co-Authored-By: Jane <jane@example.com>
  Fixes: https://bugs.launchpad.net/squid/+bug/1 fixed
  Bzr-Reference: trunk r42

The notes are commits on ``refs/notes/<namespace>`` appended to the stream.
"""

import time

from fastimport import commands

from .trace import (
    mutter,
    note,
    )


NOTES_COMMITTER_NAME = b"bzr2gitnotes"
NOTES_COMMITTER_EMAIL = b"bzr2gitnotes@example.com"


def _local_utc_offset(timestamp):
    if time.localtime(timestamp).tm_isdst and time.daylight:
        return -time.altzone
    return -time.timezone


def is_trunk_revision(revision):
    return revision is not None and "." not in revision


class NotesWriter(object):
    """Append git notes records for the commits of a graph.

    :param outf: binary file-like object to write to
    :param namespace: notes namespace, the ref written is refs/notes/<ns>
    :param continue_from: ref, commit id or ``:<mark>`` the first notes
      commit follows, to continue the notes of a previous run
    :param trunk_refs_only: only add Bzr-Reference for trunk revisions
    :param timestamp: commit time of the notes commits, defaults to now
    """

    def __init__(self, outf, namespace="commits", continue_from=None,
                 trunk_refs_only=False, timestamp=None):
        self.outf = outf
        self.ref = b"refs/notes/" + namespace.encode("utf-8")
        if isinstance(continue_from, str):
            continue_from = continue_from.encode("utf-8")
        self.continue_from = continue_from
        self.trunk_refs_only = trunk_refs_only
        if timestamp is None:
            timestamp = int(time.time())
        self.timestamp = timestamp
        self.written = 0

    def first_mark(self, graph):
        """The mark of the first notes commit."""
        mark = graph.max_mark()
        if self.continue_from is not None and \
                self.continue_from.startswith(b":"):
            mark = max(mark, int(self.continue_from[1:]))
        return mark + 1

    def reference(self, graph, commit):
        """The Bzr-Reference text of commit, or None."""
        if commit.nick is None or commit.revision is None:
            return None
        if self.trunk_refs_only and not is_trunk_revision(commit.revision):
            return None
        text = b"%s r%s" % (commit.nick, commit.revision.encode("ascii"))
        branch = commit.branch
        if branch is not None and not branch.is_trunk:
            original = graph[branch.begin]
            if original.nick is not None and original.nick != commit.nick:
                text += b" from " + original.nick
        return text

    def note_lines(self, graph, commit):
        """The lines of the note for commit; empty if it needs none."""
        lines = []
        for who in commit.authors[1:]:
            lines.append(b"Co-Authored-By: " + _name_and_email(who))
        if commit.bug:
            for bug in commit.bug.splitlines():
                if bug.strip():
                    lines.append(b"Fixes: " + bug)
        reference = self.reference(graph, commit)
        if reference is not None:
            lines.append(b"Bzr-Reference: " + reference)
        return lines

    def notes_command(self, graph, commit, mark, from_):
        """Build the notes commit for commit, or None if it has no note."""
        lines = self.note_lines(graph, commit)
        if not lines:
            return None
        reference = self.reference(graph, commit)
        if reference is None:
            reference = b":%d" % (commit.id,)
        message = (b"auto-generated git notes from bzr metadata (%s)"
            % (reference,))
        data = b"".join(line + b"\n" for line in lines)
        committer = (NOTES_COMMITTER_NAME, NOTES_COMMITTER_EMAIL,
            self.timestamp, _local_utc_offset(self.timestamp))
        file_cmds = [commands.NoteModifyCommand(b"%d" % (commit.id,), data)]
        return commands.CommitCommand(self.ref, b"%d" % (mark,), None,
            committer, message, from_, None, file_cmds)

    def write(self, graph, start=0):
        """Write the notes of the commits of graph after the first start.

        :param start: number of commits to skip, those restored from a
          checkpoint already got their notes
        :return: the mark of the last notes commit written, or None
        """
        mark = self.first_mark(graph)
        from_ = self.continue_from
        last = None
        for i, commit in enumerate(graph):
            if i < start:
                continue
            cmd = self.notes_command(graph, commit, mark, from_)
            if cmd is None:
                continue
            self.outf.write(bytes(cmd) + b"\n")
            # later notes commits follow on the same ref
            from_ = None
            last = mark
            mark += 1
            self.written += 1
        note("Wrote %d notes to %s", self.written,
            self.ref.decode("utf-8"))
        mutter("last notes mark: %s", last)
        return last


def _name_and_email(who):
    """Strip the date from a raw author identity."""
    end = who.find(b">")
    if end == -1:
        return who
    return who[:end + 1]
