"""
Filesystem tools.

Every path argument goes through :func:`resolve_safe_path` before the filesystem is touched.
Tools that delete or rename act on the named entry, so a symlink is removed or moved itself and
never its target.
Failures are left to propagate; the executor turns them into ``{"error": ...}`` payloads.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import (
    Dict,
    List,
)

from gitflash.tools import register_tool
from gitflash.tools.path_guard import resolve_safe_path

logger = logging.getLogger(__name__)


@register_tool("list_files")
def list_files(path: str, *, workdir: Path) -> str:
    """Lists files and directories in a specified path. Use '.' for the current directory."""
    target = resolve_safe_path(workdir, path)
    names = sorted(entry.name for entry in os.scandir(target))
    return "\n".join(names) or "Directory is empty."


@register_tool("read_file")
def read_file(path: str, *, workdir: Path) -> str:
    """Reads and returns the content of a specified file."""
    return resolve_safe_path(workdir, path).read_text(encoding="utf-8", errors="replace")


@register_tool("write_file")
def write_file(path: str, content: str, *, workdir: Path) -> str:
    """Writes or overwrites content to a specified file. Creates the file if it does not exist."""
    resolve_safe_path(workdir, path).write_text(content, encoding="utf-8")
    return f"Successfully wrote to '{path}'."


@register_tool("move_file")
def move_file(source: str, destination: str, *, workdir: Path) -> str:
    """Moves or renames a file or directory."""
    src = resolve_safe_path(workdir, source, follow_symlinks=False)
    dst = resolve_safe_path(workdir, destination, follow_symlinks=False)
    os.rename(src, dst)
    return f"Successfully moved '{source}' to '{destination}'."


@register_tool("delete_file")
def delete_file(path: str, *, workdir: Path) -> str:
    """Deletes a specified file."""
    resolve_safe_path(workdir, path, follow_symlinks=False).unlink()
    return f"Successfully deleted file '{path}'."


@register_tool("create_directory")
def create_directory(path: str, *, workdir: Path) -> str:
    """Creates a new directory, including any necessary parent directories."""
    resolve_safe_path(workdir, path).mkdir(parents=True, exist_ok=True)
    return f"Successfully created directory '{path}'."


@register_tool("delete_directory")
def delete_directory(path: str, *, workdir: Path) -> str:
    """Deletes a directory and all of its contents recursively."""
    target = resolve_safe_path(workdir, path, follow_symlinks=False)
    if target.is_symlink():
        target.unlink()
    elif target.is_dir():
        shutil.rmtree(target)
    elif target.exists():
        target.unlink()
    return f"Successfully deleted directory '{path}' and all its contents."


def directory_tree(directory: Path) -> List[str]:
    """
    Walk *directory* and return one line per entry.

    Directories come first (suffixed with ``/`` and followed by their own children indented
    two spaces), then files; each group is sorted by name.
    """
    entries = sorted(
        os.scandir(directory), key=lambda e: (not e.is_dir(follow_symlinks=False), e.name)
    )
    lines: List[str] = []
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            lines.append(f"{entry.name}/")
            lines.extend(f"  {line}" for line in directory_tree(Path(entry.path)))
        else:
            lines.append(entry.name)
    return lines


@register_tool("list_directory_tree")
def list_directory_tree(path: str, *, workdir: Path) -> str:
    """Recursively lists the directory tree structure starting at a given path."""
    return "\n".join(directory_tree(resolve_safe_path(workdir, path)))


@register_tool("read_directory_files")
def read_directory_files(path: str, *, workdir: Path) -> Dict[str, str]:
    """Reads the contents of all files in the given directory (non-recursive)."""
    target = resolve_safe_path(workdir, path)
    contents: Dict[str, str] = {}
    for entry in sorted(os.scandir(target), key=lambda e: e.name):
        if entry.is_file():
            # Symlinked files must still land inside the working directory
            real = resolve_safe_path(workdir, entry.path)
            contents[entry.name] = real.read_text(encoding="utf-8", errors="replace")
        else:
            logger.debug("Skipping non-file entry '%s'", entry.path)
    return contents


@register_tool("get_current_directory")
def get_current_directory(*, workdir: Path) -> str:
    """Returns the current working directory path."""
    return str(workdir)
