#!/usr/bin/python3
# Setup file for wyag
# Copyright (C) 2026 The wyag authors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

from setuptools import setup

from wyag import __version__

setup(
    name="wyag",
    version=".".join(map(str, __version__)),
    description="Loose-object git repository storage in Python",
    license="Apache-2.0 OR GPL-2.0-or-later",
    packages=["wyag"],
    package_data={"": ["py.typed"]},
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "wyag=wyag.cli:_main",
        ],
    },
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
        "Topic :: Software Development :: Version Control",
    ],
)
