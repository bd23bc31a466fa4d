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

"""Convert bzr fast-export streams for git fast-import, keeping metadata.

bzr knows about dotted revision numbers, multiple authors and bug links;
git does not.  This package copies a ``bzr fast-export --no-plain`` stream to
``git fast-import``, recovers the bzr branches from the commit graph to
number the revisions, and appends the metadata as git notes.
"""

version_info = (0, 1, 0, "final", 0)

__version__ = "%d.%d.%d" % version_info[:3]
