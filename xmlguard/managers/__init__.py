"""
Managers Package
================

Coordination layer for xmlguard.

Managers:
- FileManager: File system operations
"""

from .file_manager import FileManager

__all__ = [
    'FileManager',
]
