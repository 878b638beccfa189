#!/usr/bin/env python3

from setuptools import setup, find_packages
import os


# Read version from __init__.py (single source of truth)
def get_version():
    here = os.path.abspath(os.path.dirname(__file__))
    version_file = os.path.join(here, "xmltv2vdr", "__init__.py")

    with open(version_file, encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                # Extract version from line like: __version__ = "1.0.0"
                return line.split('"')[1]

    raise RuntimeError("Unable to find version string in __init__.py")


# Read long description from README
def read_long_description():
    here = os.path.abspath(os.path.dirname(__file__))
    try:
        with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return "XMLTV to VDR EPG loader - xmltv2vdr"


setup(
    name="xmltv2vdr",
    version=get_version(),
    description="Load XMLTV program guide data into VDR over SVDRP",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    # License
    license="GPL-3.0",
    # Package discovery
    packages=find_packages(exclude=["tests", "tests.*"]),
    # Python version requirement
    python_requires=">=3.7",
    # Core dependencies (always installed)
    install_requires=[
        "requests>=2.25.0",
        "urllib3>=1.26",
    ],
    # Optional dependencies (extras)
    extras_require={
        # Development
        "dev": [
            "pytest>=7.0",
            "flake8>=3.8",
            "black>=21.0",
            "mypy>=0.910",
            "build>=0.7.0",  # Package building
        ],
        # Tests only
        "test": [
            "pytest>=7.0",
            "pytest-cov>=2.10",
        ],
    },
    # Entry points for module execution
    entry_points={
        "console_scripts": [
            "xmltv2vdr=xmltv2vdr.__main__:main",
        ],
    },
    # PyPI classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Multimedia :: Video",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
        "Environment :: Console",
    ],
    # Keywords for PyPI search
    keywords="xmltv epg tv guide vdr svdrp",
    # Zip safe
    zip_safe=False,
)
