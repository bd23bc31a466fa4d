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

"""Processor turning a bzr fast-export stream into a git fast-import one.

The stream is read once.  Most records are copied to the output as soon as
they are read; bzr-only records (properties, directory commands, features git
does not know) are consumed.  File renames are held back until the end of the
commit, or until the renamed file is modified, so that a rename whose source
was deleted in the same commit is dropped instead of resurrecting the file.

While reading, the processor builds the CommitGraph used to number
revisions afterwards.
"""

from fastimport import errors as fastimport_errors

from . import (
    errors,
    parser,
    )
from .graph import (
    Commit,
    CommitGraph,
    Tag,
    )
from .trace import (
    mutter,
    note,
    )


# bzr features that git fast-import rejects
BZR_ONLY_FEATURES = frozenset([
    b"commit-properties",
    b"empty-directories",
    b"multiple-authors",
    ])

DIRECTORY_MODE = b"040000"

TAG_PREFIX = b"refs/tags/"

# command keyword -> handler name
_HANDLERS = {
    b"feature": "feature",
    b"reset": "reset",
    b"commit": "commit",
    b"mark": "mark",
    b"committer": "committer",
    b"author": "author",
    b"data": "data",
    b"from": "from",
    b"merge": "merge",
    b"property": "property",
    b"R": "rename",
    b"D": "delete",
    b"M": "modify",
    b"done": "done",
    }


class Rename(object):

    def __init__(self, orig, new, line):
        self.orig = orig
        self.new = new
        self.line = line

    def __repr__(self):
        return "<%s %r -> %r>" % (self.__class__.__name__, self.orig,
            self.new)


class RenameTable(object):
    """The renames of the open commit, found by either of their paths."""

    def __init__(self):
        self._by_orig = {}
        self._by_new = {}

    def __len__(self):
        return len(self._by_orig)

    def __iter__(self):
        """Iterate over the renames sorted by original path."""
        for orig in sorted(self._by_orig):
            yield self._by_orig[orig]

    def add(self, rename):
        self._by_orig[rename.orig] = rename
        self._by_new[rename.new] = rename

    def find(self, path):
        """Find the rename from or to path, or None."""
        rename = self._by_orig.get(path)
        if rename is None:
            rename = self._by_new.get(path)
        return rename

    def remove(self, rename):
        del self._by_orig[rename.orig]
        del self._by_new[rename.new]

    def clear(self):
        self._by_orig.clear()
        self._by_new.clear()


class NotesProcessor(object):
    """Copy a bzr fast-export stream to outf, building the commit graph.

    :param outf: binary file-like object the filtered stream goes to
    :param graph: the CommitGraph to add commits to; restored from a
      checkpoint when resuming
    :param dirs: directories known from a previous run
    :param tag_names: if not None, the only tags kept in the output
    """

    def __init__(self, outf, graph=None, dirs=None, tag_names=None,
                 verbose=False):
        self.outf = outf
        if graph is None:
            graph = CommitGraph()
        self.graph = graph
        self.dirs = set()
        if dirs is not None:
            self.dirs.update(dirs)
        self.tag_names = tag_names
        self.verbose = verbose
        self.reader = None
        self.tags = []
        # Handlers can set this when the stream asks to stop
        self.finished = False

    def process(self, reader):
        """Process the whole stream read by reader.

        :param reader: a parser.StreamReader
        """
        self.reader = reader
        self.pre_process()
        while True:
            line = reader.next_line()
            if line is None:
                break
            self._dispatch(line)
        self.post_process()

    def _dispatch(self, line):
        if self._skip_blank:
            self._skip_blank = False
            if not line:
                return
        keyword = line.split(b" ", 1)[0]
        try:
            name = _HANDLERS[keyword]
        except KeyError:
            # write as-is by default
            self.write_line(line)
        else:
            getattr(self, name + "_handler")(line)

    def pre_process(self):
        self.commit = None
        self.tag = None
        self._in_reset = False
        self._skip_blank = False
        self.renames = RenameTable()
        self.deleted = set()
        self._start_count = len(self.graph)

    def post_process(self):
        self._close_commit()
        self.tag = None
        if self.verbose:
            note("Read %d commits, %d tags, %d known directories",
                len(self.graph) - self._start_count, len(self.tags),
                len(self.dirs))

    def write_line(self, line):
        self.outf.write(line + b"\n")

    def feature_handler(self, line):
        feature = line[len(b"feature "):].split(b"=", 1)[0]
        if feature in BZR_ONLY_FEATURES:
            mutter("dropping bzr feature %s", feature)
            return
        self.write_line(line)

    def reset_handler(self, line):
        self._close_commit()
        self.tag = None
        self._in_reset = False
        ref = line[len(b"reset "):]
        if ref.startswith(TAG_PREFIX):
            name = ref[len(TAG_PREFIX):]
            skip = self.tag_names is not None and name not in self.tag_names
            self.tag = Tag(name, skip)
            self.tags.append(self.tag)
            if skip:
                mutter("skipping tag %s", name)
                return
        else:
            self._in_reset = True
        self.write_line(line)

    def commit_handler(self, line):
        self._close_commit()
        self.tag = None
        self._in_reset = False
        self.commit = Commit(line[len(b"commit "):])
        self.write_line(line)

    def mark_handler(self, line):
        commit = self._require_commit(line)
        mark = self._parse_mark(b"mark", line[len(b"mark "):])
        if mark in self.graph:
            raise errors.DuplicateMark(self.reader.lineno, mark)
        commit.id = mark
        self.write_line(line)

    def committer_handler(self, line):
        self._require_commit(line)
        self.write_line(line)

    def author_handler(self, line):
        commit = self._require_commit(line)
        who = line[len(b"author "):]
        parser.parse_author(self.reader.lineno, who)
        commit.authors.append(who)
        # Only the first author is known to git, the others become notes
        if len(commit.authors) == 1:
            self.write_line(line)

    def data_handler(self, line):
        self.write_line(line)
        payload = self.reader.read_data(line)
        self.outf.write(payload)
        rest = line[len(b"data "):]
        if rest.startswith(b"<<"):
            self.write_line(rest[2:])

    def from_handler(self, line):
        ref = line[len(b"from "):]
        lineno = self.reader.lineno
        if self.tag is not None:
            tag = self.tag
            self.tag = None
            anchor = None
            if ref.startswith(b":"):
                mark = self._parse_mark(b"from", ref)
                anchor = self.graph.get(mark, lineno, "from")
                tag.anchor = anchor.id
            if tag.skip:
                # A blank line may end the reset command
                self._skip_blank = True
                return
            if anchor is not None:
                anchor.tags.append(tag.name)
            else:
                mutter("tag %s anchored at non-mark reference %s", tag.name,
                    ref)
            self.write_line(line)
            return
        if not ref.startswith(b":"):
            mutter("passing through non-mark reference %s", ref)
            self.write_line(line)
            return
        mark = self._parse_mark(b"from", ref)
        if self.commit is not None:
            if self.commit.id is None:
                raise errors.MissingMark(lineno, self._text(self.commit.ref))
            self.graph.link_parent(self.commit, mark, lineno)
        elif self._in_reset:
            self.graph.get(mark, lineno, "from")
            self._in_reset = False
        else:
            raise errors.NoCommitContext(lineno, self._text(line))
        self.write_line(line)

    def merge_handler(self, line):
        commit = self._require_commit(line)
        lineno = self.reader.lineno
        ref = line[len(b"merge "):]
        if not ref.startswith(b":"):
            mutter("passing through non-mark reference %s", ref)
            self.write_line(line)
            return
        mark = self._parse_mark(b"merge", ref)
        if commit.id is None:
            raise errors.MissingMark(lineno, self._text(commit.ref))
        self.graph.link_merge(commit, mark, lineno)
        self.write_line(line)

    def property_handler(self, line):
        commit = self._require_commit(line)
        name, length, value = parser.parse_property(self.reader, line)
        if name == b"branch-nick":
            commit.nick_id, commit.nick = parser.parse_branch_nick(
                self.reader.lineno, length, value)
        elif name == b"bugs":
            commit.bug = value
        elif name == b"rebase-of":
            pass
        else:
            mutter("dropping property %s of commit :%s", name, commit.id)

    def rename_handler(self, line):
        self._require_commit(line)
        orig, new = parser.split_path_pair(line[len(b"R "):])
        # Renamed directories are tracked under their new name, git has no
        # use for the rename itself.
        if orig in self.dirs:
            self.dirs.add(new)
            return
        previous = self.renames.find(orig) or self.renames.find(new)
        if previous is not None:
            mutter("path %s renamed twice in commit :%s", orig,
                self.commit.id)
            self._flush_rename(previous)
            self.renames.remove(previous)
        self.renames.add(Rename(orig, new, line))

    def delete_handler(self, line):
        self._require_commit(line)
        path = line[len(b"D "):]
        if path in self.dirs:
            return
        self.write_line(line)
        self.deleted.add(path)

    def modify_handler(self, line):
        self._require_commit(line)
        params = parser.parse_file_modify(line[len(b"M "):])
        if params is None:
            self.reader.abort(fastimport_errors.BadFormat, "filemodify",
                "M", line)
        mode, dataref, path = params
        if mode == DIRECTORY_MODE:
            self.dirs.add(path)
            return
        # rename first, then modify
        rename = self.renames.find(path)
        if rename is not None:
            self._flush_rename(rename)
            self.renames.remove(rename)
        self.write_line(line)

    def done_handler(self, line):
        # Held back until the notes have been written
        self.finished = True

    def _flush_rename(self, rename):
        if rename.orig in self.deleted:
            mutter("dropping rename of deleted %s", rename.orig)
            return
        self.write_line(rename.line)

    def _close_commit(self):
        commit = self.commit
        if commit is None:
            return
        for rename in self.renames:
            self._flush_rename(rename)
        self.renames.clear()
        self.deleted.clear()
        if commit.id is None:
            raise errors.MissingMark(self.reader.lineno,
                self._text(commit.ref))
        self.graph.add(commit, self.reader.lineno)
        self.commit = None

    def _require_commit(self, line):
        if self.commit is None:
            raise errors.NoCommitContext(self.reader.lineno, self._text(line))
        return self.commit

    def _parse_mark(self, section, ref):
        if ref.startswith(b":"):
            ref = ref[1:]
        try:
            return int(ref)
        except ValueError:
            self.reader.abort(fastimport_errors.BadFormat,
                section.decode("ascii"), "mark", ref)

    def _text(self, b):
        return b.decode("utf-8", "replace")
