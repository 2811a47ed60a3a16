"""Browse, read and save files of the local project directory."""

import fnmatch
import os
from pathlib import Path

from .errors import InvalidPath

IGNORE_PATTERNS = [
    ".git/",
    ".hg/",
    ".svn/",
    "node_modules/",
    "__pycache__/",
    ".mypy_cache/",
    ".pytest_cache/",
    ".tox/",
    "venv/",
    ".venv/",
    "*.pyc",
    ".DS_Store",
]


def _is_relative_to(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def _ignored(rel_posix: str, is_dir: bool) -> bool:
    """Gitignore-like light matcher with directory-aware patterns."""
    name = rel_posix.rsplit("/", 1)[-1]
    for pat in IGNORE_PATTERNS:
        if pat.endswith("/"):
            if is_dir and fnmatch.fnmatch(name + "/", pat):
                return True
        elif fnmatch.fnmatch(name, pat):
            return True
    return False


def resolve(root: Path, rel: str) -> Path:
    """Absolute path of ``rel`` under ``root``; InvalidPath if it escapes."""
    if not rel:
        raise InvalidPath("Missing path parameter")
    p = (root / rel.lstrip("/")).resolve()
    if not _is_relative_to(p, root):
        raise InvalidPath("Invalid path")
    return p


def scan_directory(root: Path, current: Path | None = None) -> list[dict]:
    """Recursive listing as ``{name, type, path[, children]}`` dicts."""
    current = current or root
    entries = []
    with os.scandir(current) as it:
        for e in it:
            try:
                isdir = e.is_dir(follow_symlinks=False)
            except OSError:
                continue
            abs_child = Path(e.path).resolve()
            if not _is_relative_to(abs_child, root):
                # Out-of-root symlink
                continue
            rel = abs_child.relative_to(root).as_posix()
            if _ignored(rel, isdir):
                continue
            entries.append((e.name, isdir, rel, abs_child))

    # Directories first, then case-insensitive name
    entries.sort(key=lambda t: (not t[1], t[0].lower()))
    out = []
    for name, isdir, rel, abs_child in entries:
        node = {"name": name, "type": "directory" if isdir else "file", "path": rel}
        if isdir:
            try:
                node["children"] = scan_directory(root, abs_child)
            except PermissionError:
                node["children"] = []
        out.append(node)
    return out


def read_file(root: Path, rel: str) -> str:
    p = resolve(root, rel)
    if not p.is_file():
        raise InvalidPath("File not found")
    return p.read_text(encoding="utf-8", errors="replace")


def save_file(root: Path, rel: str, content: str) -> None:
    p = resolve(root, rel)
    if p.is_dir():
        raise InvalidPath("Path is a directory")
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
