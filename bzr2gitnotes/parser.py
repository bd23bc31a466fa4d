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

"""Reading of bzr fast-export streams.

The stream is a subset of the git-fast-import format with a few bzr
extensions (``bzr fast-export --no-plain``).  Records are LF terminated lines,
except for the payload of a data command which is raw bytes:

  data ::= (delimited_data | exact_data) lf?;
  delimited_data ::= 'data' sp '<<' delim lf (data_line lf)* delim lf;
  exact_data ::= 'data' sp declen lf binary_data;

The bzr extensions are per-commit properties.  Their value may contain LF, so
the declared length has to be honoured when reading them:

  property ::= 'property' sp name sp declen sp value lf;

Of these only three are understood:

  property branch-nick <len> <nick>
  property bugs <len> <url> <status>[ lf <url> <status>]*
  property rebase-of <len> <revision-id>

Everything in here works on bytes; paths and names are never decoded.
"""

import re

from fastimport import errors as fastimport_errors
from fastimport import parser as fastimport_parser

from . import errors


class StreamReader(fastimport_parser.LineBasedParser):
    """A LineBasedParser over a binary input stream.

    :param input_stream: a file-like object opened in binary mode
    """

    def next_line(self):
        """Get the next line without the newline or None on EOF.

        A last line with no terminating newline is returned intact.
        """
        line = self.readline()
        if not line:
            return None
        if line.endswith(b"\n"):
            return line[:-1]
        return line

    def read_data(self, line):
        """Read the payload announced by a data command.

        :param line: the data command line, e.g. ``data 12``
        :return: the payload as bytes
        """
        rest = line[len(b"data "):]
        if rest.startswith(b"<<"):
            return self.read_until(rest[2:])
        try:
            size = int(rest)
        except ValueError:
            self.abort(fastimport_errors.BadFormat, "data", "length", rest)
        return self.read_bytes(size)

    def read_until(self, terminator):
        """Read the input stream until a line equal to terminator is found.

        :return: the bytes read up to but excluding the terminator line.
        """
        lines = []
        while True:
            line = self.next_line()
            if line is None:
                self.abort(fastimport_errors.MissingTerminator, terminator)
            if line == terminator:
                break
            lines.append(line + b"\n")
        return b"".join(lines)


def split_path(s):
    """Split the first (possibly quoted) path off s.

    :return: a tuple of (path, rest) where path keeps its quotes, so that it
      compares equal to the same path in any other file command.
    """
    if s.startswith(b'"'):
        i = 1
        while i < len(s):
            c = s[i:i + 1]
            if c == b"\\":
                i += 2
                continue
            if c == b'"':
                return s[:i + 1], s[i + 2:]
            i += 1
        return s, b""
    parts = s.split(b" ", 1)
    if len(parts) == 1:
        return parts[0], b""
    return parts[0], parts[1]


def split_path_pair(s):
    """Parse two paths separated by a space.

    :return: a tuple of (old, new)
    """
    old, new = split_path(s)
    return old, new


def parse_file_modify(s):
    """Parse the arguments of a filemodify command.

    :param s: a string in the format "mode dataref path"
    :return: a tuple of (mode, dataref, path)
    """
    params = s.split(b" ", 2)
    if len(params) != 3:
        return None
    return tuple(params)


_PROPERTY_RE = re.compile(br"^property (\S+) ([0-9]+)(?: (.*))?$", re.DOTALL)


def parse_property(reader, line):
    """Parse a property command, reading any continuation of its value.

    :param reader: the StreamReader line came from
    :param line: the property command line
    :return: a tuple of (name, length, value)
    """
    match = _PROPERTY_RE.match(line)
    if match is None:
        name = line[len(b"property "):].split(b" ", 1)[0]
        raise errors.BadPropertyFormat(reader.lineno, _text(name),
            _text(line))
    name = match.group(1)
    length = int(match.group(2))
    value = match.group(3) or b""
    if len(value) < length:
        # The LF ending this line belongs to the value, and so does the
        # remainder read below.  The record's own LF follows it.
        value += b"\n" + reader.read_bytes(length - len(value) - 1)
        tail = reader.next_line()
        if tail:
            raise errors.BadPropertyFormat(reader.lineno, _text(name),
                _text(tail))
    elif len(value) > length:
        raise errors.BadPropertyFormat(reader.lineno, _text(name),
            _text(line))
    return name, length, value


def parse_branch_nick(lineno, length, value):
    """Parse a branch-nick property into the pair naming a branch.

    The declared length is kept as the id; branches are named
    ``<nick>-<id>``.

    :return: a tuple of (id, nick)
    """
    if not value or b" " in value or b"\n" in value:
        raise errors.BadPropertyFormat(lineno, "branch-nick", _text(value))
    return length, value


_WHO_RE = re.compile(br"^(.*?) ?<([^>]*)>(?: (.*))?$")


def parse_author(lineno, s):
    """Parse who information from an author command.

    :return: a tuple of (name, email) as bytes
    """
    match = _WHO_RE.match(s)
    if match is None:
        raise errors.BadAuthorFormat(lineno, _text(s))
    return match.group(1), match.group(2)


def _text(b):
    return b.decode("utf-8", "replace")
