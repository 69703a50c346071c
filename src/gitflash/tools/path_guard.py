"""Confines tool path arguments to the working directory."""

import logging
import os
from pathlib import Path

from gitflash.core.errors import PathDenied

logger = logging.getLogger(__name__)


def _check_inside(root: Path, candidate: Path, target: str) -> None:
    try:
        candidate.relative_to(root)
    except ValueError as exc:
        logger.warning("Denied path '%s' (resolves to %s, root %s)", target, candidate, root)
        raise PathDenied(target) from exc


def resolve_safe_path(
    working_directory: str | os.PathLike[str], target: str, *, follow_symlinks: bool = True
) -> Path:
    """
    Resolve *target* against *working_directory* and make sure it stays inside.

    Both sides are fully resolved (``..`` collapsed, symlinks followed) before the
    component-wise containment check, so ``../proj-evil`` never passes for ``proj``.

    With ``follow_symlinks=False`` the same check is made, but the returned path only has
    ``..`` collapsed lexically, so a final symlink component names the link itself.  Tools
    that delete or rename use this form.

    Returns
    -------
    Path
        The absolute path, resolved or lexical as requested.

    Raises
    ------
    PathDenied
        If the path is neither the working directory nor one of its descendants.
    """
    root = Path(working_directory).resolve()
    joined = root / os.fspath(target)
    resolved = joined.resolve()
    _check_inside(root, resolved, target)
    if follow_symlinks:
        return resolved

    lexical = Path(os.path.abspath(joined))
    _check_inside(root, lexical, target)
    return lexical
