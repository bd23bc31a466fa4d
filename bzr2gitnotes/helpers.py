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

"""Miscellaneous useful stuff."""

import re

from . import errors
from .trace import mutter


def read_tag_names(filename):
    """Read the names of the tags to keep from a file.

    One tag name per line; blank lines and lines starting with '#' are
    ignored.  A leading ``refs/tags/`` is accepted and stripped.

    :return: a set of tag names as bytes
    """
    try:
        f = open(filename, "rb")
    except IOError as e:
        raise errors.ConfigurationError(
            "cannot read tags file %s: %s" % (filename, e.strerror))
    names = set()
    with f:
        for line in f:
            line = line.strip()
            if not line or line.startswith(b"#"):
                continue
            if line.startswith(b"refs/tags/"):
                line = line[len(b"refs/tags/"):]
            names.add(line)
    mutter("%d tags allowed by %s", len(names), filename)
    return names


_MARK_LINE_RE = re.compile(br"^:(\d+) \S+$")


def last_mark_from_marks_file(filename):
    """Find the last mark in a git fast-import marks file.

    Notes are written after all commits, so the last mark of the previous
    import is the last notes commit.

    :return: the continuation token, e.g. ``:1234``
    """
    try:
        f = open(filename, "rb")
    except IOError as e:
        raise errors.ConfigurationError(
            "cannot read marks file %s: %s" % (filename, e.strerror))
    last = None
    with f:
        for line in f:
            line = line.strip()
            if line:
                last = line
    if last is None:
        raise errors.ConfigurationError("marks file %s is empty" % (filename,))
    match = _MARK_LINE_RE.match(last)
    if match is None:
        raise errors.ConfigurationError(
            "unknown git marks file format in %s" % (filename,))
    mutter("%s: last git mark %s", filename, match.group(1))
    return ":" + match.group(1).decode("ascii")


_MARK_TOKEN_RE = re.compile(r"^:\d+$")


def check_notes_from(ref):
    """Check a --notes-from value: a ref, a commit id or ``:<mark>``."""
    if not ref or ref.startswith(":") and not _MARK_TOKEN_RE.match(ref):
        raise errors.ConfigurationError(
            "invalid notes continuation %r, expected a ref, a commit id or"
            " :<mark>" % (ref,))
    return ref
