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

"""Test the command line"""

import io
import os
import shutil
import sys
import tempfile

from testtools import TestCase

from .. import (
    errors,
    helpers,
    )
from ..cmds import (
    main,
    parse_options,
    )
from . import commit_record


_FIRST_PART = (
    commit_record(1, authors=[b"Joe <joe@example.com> 1234567890 +0000",
        b"Jane <jane@example.com> 1234567890 +0000"]) +
    commit_record(2, parent=1) +
    commit_record(3, nick=b"feature", parent=2))

_SECOND_PART = (
    commit_record(4, parent=2, merges=[3]) +
    b"reset refs/tags/v1\nfrom :4\n\n"
    b"reset refs/tags/v2\nfrom :4\n\n")


class TestCaseInTempDir(TestCase):

    def setUp(self):
        super(TestCaseInTempDir, self).setUp()
        self.test_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.test_dir)
        self.stderr = io.StringIO()
        self.patch(sys, "stderr", self.stderr)

    def path(self, name):
        return os.path.join(self.test_dir, name)

    def write_file(self, name, content):
        with open(self.path(name), "wb") as f:
            f.write(content)
        return self.path(name)

    def read_file(self, name):
        with open(self.path(name), "rb") as f:
            return f.read()

    def run_main(self, input, *args):
        inpath = self.write_file("in.fi", input)
        return main(["--input", inpath, "--output", self.path("out.fi")]
            + list(args))


class TestOptions(TestCase):

    def setUp(self):
        super(TestOptions, self).setUp()
        self.patch(sys, "stderr", io.StringIO())

    def test_defaults(self):
        opts = parse_options([])
        self.assertEqual("commits", opts.note_ns)
        self.assertEqual("bzr2gitnotes.ckpt", opts.context_file)
        self.assertFalse(opts.store_context)
        self.assertFalse(opts.restore_context)
        self.assertEqual(None, opts.notes_from)

    def test_unknown_option(self):
        e = self.assertRaises(SystemExit, parse_options, ["--bogus"])
        self.assertEqual(2, e.code)

    def test_unexpected_argument(self):
        e = self.assertRaises(SystemExit, main, ["file.fi"])
        self.assertEqual(2, e.code)

    def test_exclusive_continuation(self):
        e = self.assertRaises(SystemExit, parse_options,
            ["--notes-from", ":1", "--git-marks-file", "marks"])
        self.assertEqual(2, e.code)


class TestMain(TestCaseInTempDir):

    def test_convert(self):
        self.assertEqual(0, self.run_main(_FIRST_PART + _SECOND_PART
            + b"done\n"))
        out = self.read_file("out.fi")
        self.assertTrue(out.endswith(b"\ndone\n"))
        self.assertEqual(1, out.count(b"done\n"))
        self.assertNotIn(b"property", out)
        self.assertNotIn(b"Jane <jane@example.com> 1234567890", out)
        notes = out[out.index(b"commit refs/notes/commits\n"):]
        self.assertNotIn(b"refs/tags/", notes)
        self.assertIn(b"Co-Authored-By: Jane <jane@example.com>\n", notes)
        self.assertIn(b"Bzr-Reference: feature r2.1.1\n", notes)
        self.assertIn(b"Bzr-Reference: trunk r3\n", notes)
        self.assertIn(b"\nmark :5\n", notes)
        self.assertEqual("", self.stderr.getvalue())

    def test_note_namespace(self):
        self.assertEqual(0, self.run_main(_FIRST_PART, "--note-ns", "bzr"))
        self.assertIn(b"commit refs/notes/bzr\n", self.read_file("out.fi"))

    def test_tags_file(self):
        tags = self.write_file("tags", b"# kept tags\n\nrefs/tags/v2\n")
        self.assertEqual(0, self.run_main(_FIRST_PART + _SECOND_PART,
            "--tags-file", tags))
        out = self.read_file("out.fi")
        self.assertNotIn(b"refs/tags/v1", out)
        self.assertIn(b"reset refs/tags/v2\nfrom :4\n", out)

    def test_unmerged_branch_warning(self):
        self.assertEqual(0, self.run_main(commit_record(1) +
            commit_record(2, nick=b"feature", parent=1) +
            commit_record(3, parent=1)))
        self.assertEqual("bzr2gitnotes: 1 commits are on branches never"
            " merged into trunk-5 and get no revision number\n",
            self.stderr.getvalue())

    def test_empty_stream(self):
        self.assertEqual(0, self.run_main(b""))
        self.assertEqual(b"", self.read_file("out.fi"))

    def test_conversion_error(self):
        self.assertEqual(1, self.run_main(commit_record(1, parent=9)))
        err = self.stderr.getvalue()
        self.assertTrue(err.startswith("bzr2gitnotes: ERROR: line "))
        self.assertIn("from references non-existent mark :9\n", err)

    def test_bad_notes_from(self):
        self.assertEqual(1, self.run_main(_FIRST_PART, "--notes-from",
            ":abc"))
        self.assertIn("Invalid configuration: invalid notes continuation",
            self.stderr.getvalue())

    def test_notes_from_mark(self):
        self.assertEqual(0, self.run_main(_FIRST_PART, "--notes-from",
            ":20"))
        out = self.read_file("out.fi")
        self.assertEqual(1, out.count(b"\nfrom :20\n"))
        self.assertIn(b"commit refs/notes/commits\nmark :21\n", out)

    def test_missing_input(self):
        self.assertEqual(1, main(["--input", self.path("missing.fi"),
            "--output", self.path("out.fi")]))
        self.assertIn("bzr2gitnotes: ERROR: ", self.stderr.getvalue())

    def test_missing_tags_file(self):
        self.assertEqual(1, self.run_main(_FIRST_PART, "--tags-file",
            self.path("missing")))
        self.assertIn("Invalid configuration: cannot read tags file",
            self.stderr.getvalue())

    def test_log_file(self):
        log = self.path("convert.log")
        self.assertEqual(0, self.run_main(_FIRST_PART + _SECOND_PART,
            "--log-file", log))
        with open(log) as f:
            content = f.read()
        self.assertIn("started at", content)
        self.assertIn("found 2 branches", content)

    def test_store_and_restore_context(self):
        context = self.path("context.ckpt")
        self.assertEqual(0, self.run_main(_FIRST_PART, "--store-context",
            "--context-file", context))
        self.assertTrue(os.path.exists(context))
        marks = self.write_file("marks",
            b":1 0123456789abcdef0123456789abcdef01234567\n"
            b":9 fedcba9876543210fedcba9876543210fedcba98\n")

        self.assertEqual(0, self.run_main(_SECOND_PART, "--restore-context",
            "--context-file", context, "--git-marks-file", marks))
        out = self.read_file("out.fi")
        self.assertNotIn(b"N inline :1\n", out)
        self.assertIn(b"commit refs/notes/commits\nmark :10\n", out)
        self.assertEqual(1, out.count(b"\nfrom :9\n"))
        # restored commits got their notes in the first run
        self.assertNotIn(b"Bzr-Reference: feature", out)
        self.assertIn(b"Bzr-Reference: trunk r3\n", out)


class TestHelpers(TestCaseInTempDir):

    def test_read_tag_names(self):
        tags = self.write_file("tags",
            b"v1\n# comment\n\n  refs/tags/v2  \n")
        self.assertEqual(set([b"v1", b"v2"]), helpers.read_tag_names(tags))

    def test_last_mark(self):
        marks = self.write_file("marks", b":3 abc\n:12 def\n\n")
        self.assertEqual(":12", helpers.last_mark_from_marks_file(marks))

    def test_bad_marks_file(self):
        marks = self.write_file("marks", b"3 abc\n")
        self.assertRaises(errors.ConfigurationError,
            helpers.last_mark_from_marks_file, marks)
        empty = self.write_file("empty", b"")
        self.assertRaises(errors.ConfigurationError,
            helpers.last_mark_from_marks_file, empty)

    def test_check_notes_from(self):
        self.assertEqual(":12", helpers.check_notes_from(":12"))
        self.assertEqual("refs/notes/commits",
            helpers.check_notes_from("refs/notes/commits"))
        self.assertEqual("0123abcd", helpers.check_notes_from("0123abcd"))
        for bad in (":abc", ":", ":12x", ""):
            self.assertRaises(errors.ConfigurationError,
                helpers.check_notes_from, bad)
