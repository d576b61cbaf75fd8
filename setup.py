#!/usr/bin/env python3
"""Setup script for steam-gameinfo package."""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="steam-gameinfo",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Steam store metadata provider for local game catalogs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/steam-gameinfo",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "mcp>=1.2.0,<2",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "vdf>=3.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "gameinfo-lookup=gameinfo.cli:lookup_main",
            "gameinfo-mcp=gameinfo.cli:mcp_main",
        ],
    },
    include_package_data=True,
)
