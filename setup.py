#!/usr/bin/python3
# Setup file for treeish
# Copyright (C) 2026 The treeish contributors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

from setuptools import setup

setup(
    name="treeish",
    version="0.1.0",
    description="Read-only access to git commits, trees and branches",
    long_description=(
        "treeish parses git commits and trees, lists the branches of a "
        "repository and keeps parsed objects in a concurrent in-memory cache."
    ),
    license="Apache-2.0 OR GPL-2.0-or-later",
    packages=["treeish"],
    package_data={"": ["py.typed"]},
    python_requires=">=3.9",
    install_requires=[],
    entry_points={"console_scripts": ["treeish=treeish.cli:_main"]},
    test_suite="tests.test_suite",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
        "Topic :: Software Development :: Version Control",
    ],
)
