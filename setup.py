#!/usr/bin/env python

from setuptools import setup


VERSION = "0.1a1"

setup(
    name="xmldoc",
    version=VERSION,
    description="A lightweight, navigable XML document tree with namespace support.",
    license="AGPL-3.0-or-later",
    packages=["_xmldoc", "_xmldoc.parser", "_xmldoc.plugins", "xmldoc"],
    python_requires=">=3.10",
    install_requires=["lxml"],
    extras_require={"test": ["pytest"]},
)
