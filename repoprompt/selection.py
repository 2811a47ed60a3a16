"""
Selection bookkeeping over a fetched tree.

A selection is an immutable path set owned by the caller; every function
returns a new set. Directory paths may appear in a selection (so the
UI can draw their checkbox) but only File nodes count towards the weight.
"""

import posixpath

from .tree import TreeNode, iter_nodes

# Binary / font / image formats never picked up by a directory toggle
EXCLUDED_EXTENSIONS = frozenset(
    {
        ".ico", ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".svg", ".avif",
        ".woff", ".woff2", ".ttf", ".otf", ".eot",
        ".pdf", ".zip", ".gz", ".tar", ".jar", ".exe", ".dll", ".so", ".dylib",
        ".mp3", ".mp4", ".mov", ".wav", ".lock",
    }
)


def is_excluded(path: str, excluded: frozenset[str] = EXCLUDED_EXTENSIONS) -> bool:
    _, ext = posixpath.splitext(path)
    return ext.lower() in excluded


def _subtree_paths(node: TreeNode, excluded: frozenset[str]) -> set[str]:
    paths = {node.path}
    for child in iter_nodes(node.children):
        if child.is_dir or not is_excluded(child.path, excluded):
            paths.add(child.path)
    return paths


def toggle_node(
    selection: frozenset[str],
    node: TreeNode,
    selected: bool,
    excluded: frozenset[str] = EXCLUDED_EXTENSIONS,
) -> frozenset[str]:
    """
    Select or unselect ``node``.

    A file is toggled on its own, whatever its extension. A directory toggles
    itself and every descendant, skipping excluded files in both directions so
    an individually picked image survives its folder being unticked.
    """
    paths = _subtree_paths(node, excluded) if node.is_dir else {node.path}
    if selected:
        return selection | paths
    return selection - paths


def selected_files(selection: frozenset[str], nodes: list[TreeNode]) -> list[TreeNode]:
    """Selected File nodes, in tree order."""
    return [n for n in iter_nodes(nodes) if not n.is_dir and n.path in selection]


def selected_weight(selection: frozenset[str], nodes: list[TreeNode]) -> int:
    return sum(n.weight for n in selected_files(selection, nodes))
