#! /usr/bin/env python3

"""Installation script for bzr2gitnotes.
Run it with
 'pip install .', or
 './setup.py --help' for more options.
"""

import os
import re
import sys

try:
    import setuptools  # noqa: F401
except ModuleNotFoundError as e:
    sys.stderr.write(f"[ERROR] Please install setuptools ({e})\n")
    sys.exit(1)

from setuptools import find_packages, setup


def get_version():
    """Read the version from the package without importing it."""
    here = os.path.dirname(os.path.abspath(__file__))
    with open(os.path.join(here, "bzr2gitnotes", "__init__.py")) as f:
        text = f.read()
    match = re.search(r"^version_info = \((\d+), (\d+), (\d+)", text, re.M)
    if match is None:
        raise RuntimeError("version_info not found in bzr2gitnotes")
    return "%s.%s.%s" % match.groups()


# std setup
setup(
    name="bzr2gitnotes",
    version=get_version(),
    description="Adapt bzr fast-export streams for git fast-import, keeping"
    " bzr revision numbers, authors and bugs as git notes",
    license="GPL-2.0-or-later",
    python_requires=">=3.8",
    packages=find_packages(include=["bzr2gitnotes", "bzr2gitnotes.*"]),
    install_requires=[
        "fastimport>=0.9.14",
    ],
    extras_require={
        "test": [
            "testtools",
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": ["bzr2gitnotes=bzr2gitnotes.cmds:main"],
    },
    classifiers=[
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v2 or later (GPLv2+)",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Version Control",
    ],
)
