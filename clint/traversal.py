"""
File system traversal: collect the C files to analyze from files and directories.

Directories are walked recursively, skipping symlinks and any directory whose
name is in the ignore set. Results are sorted for deterministic ordering.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = frozenset({".c"})
HEADER_SUFFIXES = frozenset({".h"})


def is_source_file(path: Path, include_headers: bool = False) -> bool:
    """
    True for .c files, and for .h files when include_headers is set.

    Examples:
        >>> is_source_file(Path("main.c"))
        True
        >>> is_source_file(Path("api.h"))
        False
    """
    suffix = path.suffix.lower()
    return suffix in SOURCE_SUFFIXES or (include_headers and suffix in HEADER_SUFFIXES)


def find_source_files(
    root: Path,
    include_headers: bool = False,
    ignore_dirs: Optional[Set[str]] = None,
) -> list[Path]:
    """
    Recursively find C source files under root.

    Raises:
        FileNotFoundError: root does not exist.
        NotADirectoryError: root is not a directory.
    """
    ignore_dirs = ignore_dirs or set()
    root = root.resolve()
    if not root.exists():
        raise FileNotFoundError(f"Root directory does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    collected: list[Path] = []

    def _walk(current: Path) -> None:
        try:
            entries = list(current.iterdir())
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current, e)
            return
        for entry in entries:
            if entry.is_symlink():
                logger.debug("Skipping symlink: %s", entry)
            elif entry.is_dir():
                if entry.name in ignore_dirs:
                    logger.debug("Ignoring directory: %s", entry)
                    continue
                _walk(entry)
            elif entry.is_file() and is_source_file(entry, include_headers):
                collected.append(entry)

    _walk(root)
    collected.sort()
    logger.info("Found %d source file(s) in %s", len(collected), root)
    return collected


def collect_sources(
    targets: Iterable[Path],
    include_headers: bool = False,
    ignore_dirs: Optional[Set[str]] = None,
) -> list[Path]:
    """
    Resolve CLI targets into files: files are taken as given, directories are walked.
    Duplicates are dropped; first occurrence wins.
    """
    seen: set[Path] = set()
    files: list[Path] = []
    for target in targets:
        if target.is_dir():
            found = find_source_files(target, include_headers, ignore_dirs)
            if not found:
                logger.warning("No source files found under %s", target)
        elif target.is_file():
            found = [target.resolve()]
        else:
            logger.warning("Skipping %s: not a file or directory", target)
            continue
        for path in found:
            if path not in seen:
                seen.add(path)
                files.append(path)
    return files
