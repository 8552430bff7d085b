#!/usr/bin/env python3
"""
Setup configuration for tune-bridge
Read YouTube Music and Spotify playlists in a browser and find them on Apple Music
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "selenium>=4.15.0",
    "click>=8.2.0",
    "rich-click>=1.8.0",
    "rich>=13.7.0",
    "pyyaml>=6.0.1",
    "tqdm>=4.66.1",
    "rapidfuzz>=3.5.2",
]

setup(
    name="tune-bridge",
    version="0.1.0",
    author="tune-bridge Team",
    description="Extract YouTube Music and Spotify playlists and resolve them on Apple Music",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Internet :: WWW/HTTP :: Browsers",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tunebridge=tune_bridge.cli:main",
        ],
    },
    keywords="youtube music spotify apple music playlist selenium cli",
)
