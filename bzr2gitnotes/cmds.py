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

"""bzr fast-export to git fast-import adapter writing bzr metadata as notes.

Typical use, converting a branch in one go:

    % bzr fast-export --no-plain trunk |
          bzr2gitnotes | git fast-import

Converting a long history in parts, keeping the commit graph in between:

    % bzr2gitnotes --input=part1.fi --output=part1.git --store-context
    % bzr2gitnotes --input=part2.fi --output=part2.git --restore-context \\
          --store-context --git-marks-file=marks.git
"""

import optparse
import sys
import time

from fastimport import errors as fastimport_errors

from . import (
    __version__,
    helpers,
    trace,
    )
from .branches import (
    build_branches,
    resolve_branch_levels,
    )
from .checkpoint import (
    load_checkpoint,
    save_checkpoint,
    )
from .notes import NotesWriter
from .parser import StreamReader
from .processor import NotesProcessor
from .revno import number_revisions
from .trace import mutter


DEFAULT_CHECKPOINT_FILE = "bzr2gitnotes.ckpt"

DEFAULT_LOG_FILE = "bzr2gitnotes.log"


def create_parser():
    parser = optparse.OptionParser("%prog [options]",
        version="%prog " + __version__,
        description="Adapt a 'bzr fast-export --no-plain' stream for"
                    " 'git fast-import', keeping extra authors, bug"
                    " links and bzr revision numbers as git notes.")
    parser.add_option("--input", metavar="FILE",
        help="read the bzr stream from FILE instead of stdin")
    parser.add_option("--output", metavar="FILE",
        help="write the git stream to FILE instead of stdout")
    parser.add_option("--store-context", action="store_true", default=False,
        help="save the commit graph after reading the stream")
    parser.add_option("--restore-context", action="store_true",
        default=False,
        help="load the commit graph saved by a previous run first")
    parser.add_option("--context-file", metavar="FILE",
        default=DEFAULT_CHECKPOINT_FILE,
        help="file the commit graph is saved to and loaded from"
             " [default: %default]")
    parser.add_option("--note-ns", metavar="NAME", default="commits",
        help="write notes to refs/notes/NAME [default: %default]")
    parser.add_option("--logging", action="store_true", default=False,
        help="write diagnostics to " + DEFAULT_LOG_FILE)
    parser.add_option("--log-file", metavar="FILE",
        help="write diagnostics to FILE")
    parser.add_option("--notes-from", metavar="REF",
        help="continue the notes of a previous run: a ref, a commit id"
             " or :MARK")
    parser.add_option("--git-marks-file", metavar="FILE",
        help="continue the notes of a previous run from the last mark in"
             " the git fast-import marks FILE")
    parser.add_option("--tags-file", metavar="FILE",
        help="only keep the tags named in FILE, one per line")
    parser.add_option("--trunk-refs-only", action="store_true",
        default=False,
        help="only add Bzr-Reference notes for trunk revisions")
    parser.add_option("-v", "--verbose", action="store_true", default=False,
        help="show progress information")
    return parser


def parse_options(argv):
    """Parse the command line.

    Unknown options and any argument end the process with exit code 2.
    """
    parser = create_parser()
    opts, args = parser.parse_args(argv)
    if args:
        parser.error("unexpected arguments: %s" % (" ".join(args),))
    if opts.notes_from and opts.git_marks_file:
        parser.error("--notes-from and --git-marks-file are exclusive")
    return opts


def convert(opts, inf, outf):
    """Run a conversion from inf to outf as configured by opts.

    :param opts: options as returned by parse_options
    :param inf: binary file-like object with the bzr stream
    :param outf: binary file-like object for the git stream
    :return: the NotesProcessor used
    """
    tag_names = None
    if opts.tags_file:
        tag_names = helpers.read_tag_names(opts.tags_file)
    continue_from = opts.notes_from
    if continue_from is not None:
        helpers.check_notes_from(continue_from)
    if opts.git_marks_file:
        continue_from = helpers.last_mark_from_marks_file(opts.git_marks_file)

    graph = dirs = None
    restored = 0
    if opts.restore_context:
        graph, dirs = load_checkpoint(opts.context_file)
        restored = len(graph)
        trace.note("Restored %d commits from %s", restored,
            opts.context_file)

    processor = NotesProcessor(outf, graph, dirs, tag_names,
        verbose=opts.verbose)
    processor.process(StreamReader(inf))
    graph = processor.graph

    if opts.store_context:
        save_checkpoint(opts.context_file, graph, processor.dirs)
        trace.note("Saved %d commits to %s", len(graph), opts.context_file)

    levels = resolve_branch_levels(graph)
    tree = build_branches(graph, levels)
    number_revisions(graph, tree)
    unnumbered = [c.id for c in graph if c.revision is None]
    if unnumbered:
        trace.warning("%d commits are on branches never merged into %s and"
            " get no revision number", len(unnumbered), tree.trunk.name)
        mutter("unnumbered commits: %s", unnumbered)

    writer = NotesWriter(outf, opts.note_ns, continue_from,
        trunk_refs_only=opts.trunk_refs_only)
    writer.write(graph, restored)
    if processor.finished:
        outf.write(b"done\n")
    return processor


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    opts = parse_options(argv)
    trace.enable_default_logging(verbose=opts.verbose)
    log_handler = None
    if opts.logging or opts.log_file:
        log_handler = trace.enable_log_file(opts.log_file or DEFAULT_LOG_FILE)
    mutter("started at %s", time.ctime())
    try:
        try:
            inf = outf = None
            if opts.input:
                inf = open(opts.input, "rb")
            if opts.output:
                outf = open(opts.output, "wb")
            convert(opts, inf or sys.stdin.buffer,
                outf or sys.stdout.buffer)
        finally:
            if inf is not None:
                inf.close()
            if outf is not None:
                outf.close()
            else:
                sys.stdout.flush()
    except (fastimport_errors.ImportError, EnvironmentError,
            KeyboardInterrupt):
        return trace.report_exception(sys.exc_info(), sys.stderr)
    finally:
        if log_handler is not None:
            mutter("finished at %s", time.ctime())
            trace.disable_log_file(log_handler)
    return 0
