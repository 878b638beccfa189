"""
xmltv2vdr.args - Command line argument parsing module

Provides argument parsing, validation and default paths for xmltv2vdr.
"""

from .base import ArgumentParser
from .validator import ArgumentValidator
from .path_manager import PathManager

# Primary export
__all__ = [
    "ArgumentParser",      # Main public interface
    "ArgumentValidator",   # For testing/validation
    "PathManager",         # For path management
]
