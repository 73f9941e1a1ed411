"""
File Manager
============

Manages file system operations.
Follows SRP: Only handles file system utilities.
"""

import logging
import os
from pathlib import Path
from typing import List, Tuple

from ..core.settings import XML_EXTENSION, XSD_EXTENSION

logger = logging.getLogger(__name__)


class FileManager:
    """
    Manager responsible for file system operations.

    Follows SRP: Only handles file operations.
    """

    def directory_exists(self, directory: str) -> bool:
        return os.path.exists(directory) and os.path.isdir(directory)

    def list_files(self, directory: str, extension: str) -> List[str]:
        """
        List files in directory with the given extension, sorted by name.

        Args:
            directory: Directory to search
            extension: Extension including the dot

        Returns:
            List of file paths (empty if the directory cannot be read)
        """
        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            logger.error("Error reading directory %s: %s", directory, e)
            return []
        return [
            os.path.join(directory, name)
            for name in names
            if os.path.splitext(name)[1].lower() == extension
        ]

    def list_validation_files(self, directory: str) -> Tuple[List[str], List[str]]:
        """
        List XML documents and XSD schemas found in a directory.

        Returns:
            (xml_files, xsd_files)
        """
        return (
            self.list_files(directory, XML_EXTENSION),
            self.list_files(directory, XSD_EXTENSION),
        )

    def collect_xml_files(self, targets: List[str]) -> List[str]:
        """
        Expand files and directories into a flat list of XML documents.

        Args:
            targets: File or directory paths

        Returns:
            XML file paths in the order given (directories expanded sorted)
        """
        collected: List[str] = []
        for target in targets:
            if self.directory_exists(target):
                collected.extend(self.list_files(target, XML_EXTENSION))
            else:
                collected.append(str(Path(target)))
        return collected
