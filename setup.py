#!/usr/bin/env python3
"""
Setup script for yamlanno.

yamlanno is a pure Python package layered on PyYAML's representer; it has
no extension modules to build.

Extras:
- test : pytest, for running tests/
"""

import os

from setuptools import setup


def read_version():
    """Read __version__ from the package without importing it."""
    init_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'yamlanno', '__init__.py')
    with open(init_path, encoding='utf-8') as f:
        for line in f:
            if line.startswith('__version__'):
                return line.split('=', 1)[1].strip().strip('"\'')
    raise RuntimeError("__version__ not found in %s" % init_path)


setup(
    name='yamlanno',
    version=read_version(),
    description='Annotation driven ordering, skipping and flattening for PyYAML dumps',
    packages=['yamlanno'],
    python_requires='>=3.10',
    install_requires=['PyYAML>=6.0'],
    extras_require={'test': ['pytest>=7']},
)
