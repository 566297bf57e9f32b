"""
File operations used while building a repro.

Directory creation, response-file writes and the file/tree copies behind the
input workspace all go through here so failures surface as consistent OSErrors.
"""

import shutil
from pathlib import Path


class FileOperations:
    """Centralized file operations with consistent error handling."""

    @staticmethod
    def ensure_directory(path: Path) -> None:
        """Ensure directory exists, create with parents if needed.

        Args:
            path: Directory path to ensure exists

        Raises:
            OSError: If directory cannot be created due to permissions
        """
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"Cannot create directory: {path}") from e

    @staticmethod
    def atomic_write(path: Path, content: str, encoding: str = "utf-8") -> None:
        """Atomic file write using temp file + rename pattern.

        Args:
            path: Target file path
            content: Content to write
            encoding: File encoding (default: utf-8)

        Raises:
            OSError: If file cannot be written due to permissions or I/O error
        """
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            FileOperations.ensure_directory(path.parent)

            with open(temp_path, "w", encoding=encoding, newline="\n") as f:
                f.write(content)

            temp_path.replace(path)

        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass  # Best effort cleanup
            raise OSError(f"Failed to write file: {path}") from e

    @staticmethod
    def copy_file(source: Path, destination: Path) -> None:
        """Copy a single file, refusing to overwrite an existing destination.

        Raises:
            FileNotFoundError: If the source file does not exist
            FileExistsError: If the destination already exists
            OSError: On any other copy failure
        """
        if not source.is_file():
            raise FileNotFoundError(f"Source file not found: {source}")
        if destination.exists():
            raise FileExistsError(f"Destination already exists: {destination}")
        shutil.copy2(source, destination)

    @staticmethod
    def copy_tree(source: Path, destination: Path) -> None:
        """Recursively copy a directory into a destination that must not exist yet.

        Raises:
            FileNotFoundError: If the source directory does not exist
            OSError: On any copy failure (shutil.Error is an OSError)
        """
        if not source.is_dir():
            raise FileNotFoundError(f"Source directory not found: {source}")
        shutil.copytree(source, destination)

    @staticmethod
    def remove_tree(path: Path) -> None:
        """Remove a directory tree, or a single file occupying the path."""
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
