"""Tests for selection bookkeeping over a fetched tree."""

from repoprompt.selection import (
    is_excluded,
    selected_files,
    selected_weight,
    toggle_node,
)
from repoprompt.tree import NodeKind, TreeNode


def file(path, weight):
    return TreeNode(name=path.rsplit("/", 1)[-1], path=path, kind=NodeKind.FILE, weight=weight)


def directory(path, *children):
    return TreeNode(
        name=path.rsplit("/", 1)[-1],
        path=path,
        kind=NodeKind.DIRECTORY,
        weight=sum(c.weight for c in children),
        children=list(children),
    )


def make_tree():
    sub = directory("app/lib", file("app/lib/a.py", 5), file("app/lib/b.py", 7))
    app = directory("app", sub, file("app/icon.ico", 40))
    return [app, file("README.md", 3)]


def test_directory_toggle_skips_excluded_files():
    nodes = make_tree()
    selection = toggle_node(frozenset(), nodes[0], True)
    assert selection == {"app", "app/lib", "app/lib/a.py", "app/lib/b.py"}
    assert "app/icon.ico" not in selection
    assert selected_weight(selection, nodes) == 12


def test_directories_are_not_counted():
    nodes = make_tree()
    selection = frozenset({"app", "app/lib"})
    assert selected_weight(selection, nodes) == 0
    assert selected_files(selection, nodes) == []


def test_excluded_file_can_be_selected_individually():
    nodes = make_tree()
    icon = nodes[0].children[1]
    selection = toggle_node(frozenset(), icon, True)
    assert selection == {"app/icon.ico"}
    assert selected_weight(selection, nodes) == 40


def test_unselecting_directory_keeps_individually_picked_excluded_file():
    nodes = make_tree()
    selection = toggle_node(frozenset(), nodes[0], True)
    selection = toggle_node(selection, nodes[0].children[1], True)
    selection = toggle_node(selection, nodes[0], False)
    assert selection == {"app/icon.ico"}


def test_toggle_returns_new_set():
    nodes = make_tree()
    before = frozenset({"README.md"})
    after = toggle_node(before, nodes[0], True)
    assert before == {"README.md"}
    assert after >= before


def test_selected_files_in_tree_order():
    nodes = make_tree()
    selection = frozenset({"README.md", "app/lib/b.py", "app/lib/a.py"})
    assert [n.path for n in selected_files(selection, nodes)] == [
        "app/lib/a.py",
        "app/lib/b.py",
        "README.md",
    ]


def test_is_excluded_ignores_case():
    assert is_excluded("assets/Logo.PNG")
    assert is_excluded("fonts/inter.woff2")
    assert not is_excluded("src/main.py")
    assert not is_excluded("Makefile")
