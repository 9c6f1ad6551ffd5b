#!/usr/bin/env python3
"""
Setup script for lightsail-deploy.
"""

import codecs
import os
import re
from setuptools import setup, find_packages


def read(rel_path):
    """Read file content."""
    here = os.path.abspath(os.path.dirname(__file__))
    with codecs.open(os.path.join(here, rel_path), 'r', 'utf-8') as fp:
        return fp.read()


def find_version(rel_path):
    """Extract version from __version__.py file."""
    init_content = read(rel_path)
    version_match = re.search(
        r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
        init_content,
        re.MULTILINE
    )
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


if __name__ == "__main__":
    setup(
        name="lightsail-deploy",
        version=find_version("lightsail_deploy/__version__.py"),
        description="Generate AWS Lightsail deployment configuration and GitHub Actions workflows",
        author="vistart",
        author_email="i@vistart.me",
        license="MIT",
        packages=find_packages(exclude=["tests*", "docs*", "examples*", "scripts*"]),
        package_data={
            "lightsail_deploy": [
                "templates/workflows/*.tmpl",
                "templates/schemas/*.json",
                "templates/apps/*/*.tmpl",
                "templates/apps/*/*/*.tmpl",
            ],
        },
        python_requires=">=3.8",
        install_requires=[
            "click>=8.0",
            "rich>=12.0",
            "PyYAML>=6.0",
            "jsonschema>=4.0",
        ],
        extras_require={
            "test": [
                "pytest>=7.0",
            ],
        },
        entry_points={
            "console_scripts": [
                "lightsail-deploy=lightsail_deploy.cli.main:main",
            ],
        },
    )
