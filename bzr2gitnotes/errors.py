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

"""Exception classes for bzr2gitnotes.

Every error is fatal to a conversion. Protocol errors carry the line number
of the offending record; consistency errors mean the history did not fit the
branch partition heuristics.
"""

from fastimport import errors as fastimport_errors

# Prefix to messages to show location information
_LOCATION_FMT = "line %(lineno)d: "


class ConversionError(fastimport_errors.ImportError):
    """The base exception class for all conversion errors."""

    _fmt = "Unknown conversion error"

    def __str__(self):
        return self._fmt % self.__dict__


class ProtocolError(fastimport_errors.ParsingError):
    """The input stream does not follow the expected protocol."""

    _fmt = _LOCATION_FMT + "Unknown protocol error"

    def __init__(self, lineno):
        self.lineno = lineno
        fastimport_errors.ParsingError.__init__(self, lineno)

    def __str__(self):
        return self._fmt % self.__dict__


class NoCommitContext(ProtocolError):
    """A record that only makes sense inside a commit appeared outside one."""

    _fmt = _LOCATION_FMT + "No open commit for record: %(record)s"

    def __init__(self, lineno, record):
        self.record = record
        ProtocolError.__init__(self, lineno)


class UnknownMark(ProtocolError):

    _fmt = (_LOCATION_FMT
            + "%(section)s references non-existent mark :%(mark)d")

    def __init__(self, lineno, section, mark):
        self.section = section
        self.mark = mark
        ProtocolError.__init__(self, lineno)


class DuplicateMark(ProtocolError):

    _fmt = _LOCATION_FMT + "Mark :%(mark)d is already used by a commit"

    def __init__(self, lineno, mark):
        self.mark = mark
        ProtocolError.__init__(self, lineno)


class MissingMark(ProtocolError):

    _fmt = _LOCATION_FMT + "Commit %(ref)s has no mark"

    def __init__(self, lineno, ref):
        self.ref = ref
        ProtocolError.__init__(self, lineno)


class BadPropertyFormat(ProtocolError):

    _fmt = _LOCATION_FMT + "Invalid property %(name)s format: %(text)s"

    def __init__(self, lineno, name, text):
        self.name = name
        self.text = text
        ProtocolError.__init__(self, lineno)


class BadAuthorFormat(ProtocolError):

    _fmt = _LOCATION_FMT + "Invalid author format: %(text)s"

    def __init__(self, lineno, text):
        self.text = text
        ProtocolError.__init__(self, lineno)


class ConsistencyError(ConversionError):
    """The commit graph violates the branch partition assumptions."""

    _fmt = "Inconsistent history"


class NotAForkPoint(ConsistencyError):

    _fmt = ("Branch %(branch)s ends at commit :%(mark)d which is not a fork"
            " point")

    def __init__(self, branch, mark):
        self.branch = branch
        self.mark = mark
        ConsistencyError.__init__(self)


class BrokenChain(ConsistencyError):

    _fmt = ("Branch %(branch)s reaches root commit :%(mark)d without meeting"
            " %(expected)s")

    def __init__(self, branch, mark, expected):
        self.branch = branch
        self.mark = mark
        self.expected = expected
        ConsistencyError.__init__(self)


class RevisionCountMismatch(ConsistencyError):

    _fmt = ("Expected position 1 at commit :%(mark)d of branch %(branch)s,"
            " but got %(position)d")

    def __init__(self, branch, mark, position):
        self.branch = branch
        self.mark = mark
        self.position = position
        ConsistencyError.__init__(self)


class RevisionAlreadySet(ConsistencyError):

    _fmt = ("Commit :%(mark)d already has revision %(old)s, cannot set"
            " %(new)s")

    def __init__(self, mark, old, new):
        self.mark = mark
        self.old = old
        self.new = new
        ConsistencyError.__init__(self)


class BranchAlreadyAssigned(ConsistencyError):

    _fmt = "Commit :%(mark)d already belongs to branch %(branch)s"

    def __init__(self, mark, branch):
        self.mark = mark
        self.branch = branch
        ConsistencyError.__init__(self)


class ConfigurationError(ConversionError):

    _fmt = "Invalid configuration: %(reason)s"

    def __init__(self, reason):
        self.reason = reason
        ConversionError.__init__(self)


class CheckpointError(ConversionError):

    _fmt = "Cannot read checkpoint %(filename)s: %(reason)s"

    def __init__(self, filename, reason):
        self.filename = filename
        self.reason = reason
        ConversionError.__init__(self)
