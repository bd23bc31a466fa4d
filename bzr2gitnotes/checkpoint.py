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

"""Routines for reading/writing a checkpoint file.

A checkpoint holds what a later run over the rest of a history needs: the
commits read so far and the known directories.  The format is line based,
with counts in front of each list and the length in front of free text::

  bzr2gitnotes-checkpoint format=1
  dirs 1
  doc
  commits 1
  commit 1
  ref refs/heads/master
  nick 5 trunk
  author Joe <joe@example.com> 1234567890 +0000
  bug 36
  https://launchpad.net/bugs/1 fixed
  end

``from <mark>`` and ``merge <mark>`` lines link a commit to commits listed
before it.
"""

import os
import re

from fastimport import errors as fastimport_errors

from . import errors
from .graph import (
    Commit,
    CommitGraph,
    )
from .parser import StreamReader
from .trace import mutter


FORMAT_VERSION = 1

_HEADER_RE = re.compile(br"^bzr2gitnotes-checkpoint format=(\d+)$")


def save_checkpoint(filename, graph, dirs):
    """Save the commit graph and the known directories to filename.

    The file is replaced in one step, so an interrupted save leaves any
    previous checkpoint intact.
    """
    tmpname = filename + ".tmp"
    with open(tmpname, "wb") as f:
        f.write(b"bzr2gitnotes-checkpoint format=%d\n" % (FORMAT_VERSION,))
        dirs = sorted(dirs)
        f.write(b"dirs %d\n" % (len(dirs),))
        for path in dirs:
            f.write(path + b"\n")
        f.write(b"commits %d\n" % (len(graph),))
        for commit in graph:
            _write_commit(f, commit)
    os.replace(tmpname, filename)
    mutter("saved %d commits and %d directories to %s", len(graph),
        len(dirs), filename)


def _write_commit(f, commit):
    f.write(b"commit %d\n" % (commit.id,))
    if commit.ref is not None:
        f.write(b"ref " + commit.ref + b"\n")
    if commit.nick is not None:
        f.write(b"nick %d %s\n" % (commit.nick_id, commit.nick))
    if commit.parent is not None:
        f.write(b"from %d\n" % (commit.parent,))
    for mark in commit.merge_parents:
        f.write(b"merge %d\n" % (mark,))
    for who in commit.authors:
        f.write(b"author " + who + b"\n")
    if commit.bug is not None:
        f.write(b"bug %d\n" % (len(commit.bug),))
        f.write(commit.bug + b"\n")
    f.write(b"end\n")


def load_checkpoint(filename):
    """Read a checkpoint written by save_checkpoint.

    :return: a tuple of (graph, dirs)
    :raises CheckpointError: if the file is missing, of an unknown format
      version or damaged
    """
    try:
        f = open(filename, "rb")
    except IOError as e:
        raise errors.CheckpointError(filename, e.strerror)
    with f:
        reader = StreamReader(f)
        try:
            graph, dirs = _read_checkpoint(filename, reader)
        except fastimport_errors.ParsingError as e:
            raise errors.CheckpointError(filename, str(e))
        except ValueError:
            raise errors.CheckpointError(filename,
                "bad number at line %d" % (reader.lineno,))
    mutter("restored %d commits and %d directories from %s", len(graph),
        len(dirs), filename)
    return graph, dirs


def _read_checkpoint(filename, reader):
    header = reader.next_line()
    match = _HEADER_RE.match(header or b"")
    if match is None:
        raise errors.CheckpointError(filename, "not a checkpoint file")
    version = int(match.group(1))
    if version != FORMAT_VERSION:
        raise errors.CheckpointError(filename,
            "format version %d not supported" % (version,))

    dirs = set()
    for i in range(_read_count(filename, reader, b"dirs")):
        path = reader.next_line()
        if path is None:
            raise errors.CheckpointError(filename, "truncated directory list")
        dirs.add(path)

    graph = CommitGraph()
    for i in range(_read_count(filename, reader, b"commits")):
        _read_commit(filename, reader, graph)
    return graph, dirs


def _read_count(filename, reader, section):
    line = reader.next_line()
    if line is None or not line.startswith(section + b" "):
        raise errors.CheckpointError(filename,
            "expected %s count at line %d" % (section.decode("ascii"),
                reader.lineno))
    return int(line[len(section) + 1:])


def _read_commit(filename, reader, graph):
    line = reader.next_line()
    if line is None or not line.startswith(b"commit "):
        raise errors.CheckpointError(filename,
            "expected commit at line %d" % (reader.lineno,))
    commit = Commit(id=int(line[len(b"commit "):]))
    while True:
        line = reader.next_line()
        if line is None:
            raise errors.CheckpointError(filename,
                "truncated commit :%d" % (commit.id,))
        if line == b"end":
            break
        key, _, value = line.partition(b" ")
        if key == b"ref":
            commit.ref = value
        elif key == b"nick":
            nick_id, nick = value.split(b" ", 1)
            commit.nick_id = int(nick_id)
            commit.nick = nick
        elif key == b"from":
            graph.link_parent(commit, int(value), reader.lineno)
        elif key == b"merge":
            graph.link_merge(commit, int(value), reader.lineno)
        elif key == b"author":
            commit.authors.append(value)
        elif key == b"bug":
            commit.bug = reader.read_bytes(int(value))
            reader.next_line()
        else:
            raise errors.CheckpointError(filename,
                "unknown record %r at line %d" % (key, reader.lineno))
    graph.add(commit, reader.lineno)
