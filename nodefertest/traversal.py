"""
File system traversal: walk directories and collect Go source files.

This module provides utilities for recursively traversing a Go module or
package tree to find the files the analyzer should look at. By default only
test files (``*_test.go``) are interesting, since that is where ``go test``
looks for Test and Benchmark functions, but all ``.go`` files can be
collected too.

Directories are skipped the way the Go tool skips them: ``testdata`` and
``vendor``, anything starting with ``.`` or ``_``, plus common build and
editor folders.

Typical usage:
    from pathlib import Path
    from nodefertest.traversal import find_source_files

    # Only *_test.go files, default ignore set
    test_files = find_source_files(Path("./my_module"), tests_only=True)

    # Every .go file, custom ignore set
    sources = find_source_files(Path("./my_module"), ignore_dirs={"build", "vendor"})
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)

GO_TEST_SUFFIX = "_test.go"

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Ignored by the go tool itself
    "testdata",
    "vendor",

    # Build and distribution directories
    "build",
    "dist",
    "out",
    "bin",

    # Dependency directories of mixed-language repositories
    "node_modules",
    "third_party",

    # Version control
    ".git",
    ".svn",
    ".hg",

    # IDE and editor directories
    ".vscode",
    ".idea",
}

# The go tool ignores directories whose names begin with these characters
IGNORED_DIR_PREFIXES = (".", "_")


def is_go_file(path: Path) -> bool:
    """
    Check if a file is a Go source file (.go extension).

    Examples:
        >>> is_go_file(Path("main.go"))
        True
        >>> is_go_file(Path("main_test.go"))
        True
        >>> is_go_file(Path("go.mod"))
        False
    """
    return path.suffix == ".go"


def is_go_test_file(path: Path) -> bool:
    """
    Check if a file is a Go test file (name ends with _test.go).

    Examples:
        >>> is_go_test_file(Path("server_test.go"))
        True
        >>> is_go_test_file(Path("server.go"))
        False
    """
    return path.name.endswith(GO_TEST_SUFFIX)


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """
    Check if a directory should be ignored during traversal.

    Args:
        dir_path: Path to the directory to check.
        ignore_dirs: Set of directory names to ignore (case-sensitive).

    Returns:
        True if the directory should be skipped, False otherwise.

    Notes:
        - Only checks the directory name, not the full path.
        - Directories starting with '.' or '_' are always ignored.

    Examples:
        >>> should_ignore_directory(Path("vendor"), {"vendor"})
        True
        >>> should_ignore_directory(Path("_examples"), set())
        True
        >>> should_ignore_directory(Path("internal"), {"vendor"})
        False
    """
    name = dir_path.name
    return name in ignore_dirs or name.startswith(IGNORED_DIR_PREFIXES)


def find_source_files(
    root: Path,
    tests_only: bool = False,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively find Go source files in a directory tree.

    This is the main entry point for file traversal. It walks the directory
    tree starting from `root`, collecting .go files (or only *_test.go files)
    while skipping ignored directories.

    Args:
        root: Root directory to start traversal from.
        tests_only: If True, only collect *_test.go files.
        ignore_dirs: Set of directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: If True, follow symbolic links during traversal.
                         If False (default), symlinks are skipped.
        filter_fn: Optional additional filter function. If provided, only files
                   for which filter_fn(path) returns True are included.

    Returns:
        Sorted list of Path objects for all matching source files found.

    Raises:
        FileNotFoundError: If the root directory does not exist.
        NotADirectoryError: If the root path is a file.

    Notes:
        - Permission errors on subdirectories are logged but do not stop traversal.
        - The root path is resolved to an absolute path before traversal.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()

    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Root directory does not exist: {root}")

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Starting traversal from: %s", root)
    logger.debug(
        "Traversal config: tests_only=%s, follow_symlinks=%s, ignore_dirs=%s",
        tests_only,
        follow_symlinks,
        ignore_dirs,
    )

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        """Recursive helper to walk directory tree."""
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue

                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)

                elif entry.is_file():
                    if not is_go_file(entry):
                        continue
                    if tests_only and not is_go_test_file(entry):
                        continue
                    if filter_fn is not None and not filter_fn(entry):
                        logger.debug("Filtered out by custom filter: %s", entry)
                        continue

                    logger.debug("Found source file: %s", entry)
                    collected_files.append(entry)

        except PermissionError as e:
            logger.warning("Permission denied accessing directory %s: %s", current_dir, e)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)

    collected_files.sort()

    logger.info(
        "Traversal complete: found %d source file(s) in %s",
        len(collected_files),
        root,
    )

    return collected_files

