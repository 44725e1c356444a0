#!/usr/bin/env python3
"""Setup script for mpd-trigger package."""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mpd-trigger",
    version="0.1.0",
    description="Run a templated shell command on every MPD player event",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["mpdtrigger", "mpdtrigger.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio :: Players",
    ],
    python_requires=">=3.10",
    install_requires=[
        "python-mpd2>=3.0.0",
        "mcp>=1.0.0,<2",
        "PyYAML>=6.0",
        "pydantic>=2",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "mpd-trigger=mpdtrigger.cli:main",
            "mpd-trigger-mcp=mpdtrigger.cli:mcp_main",
        ],
    },
    include_package_data=True,
)
