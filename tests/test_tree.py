"""Tests for the recursive tree fetch and token roll-up."""

import asyncio

import pytest

from repoprompt.errors import FetchError
from repoprompt.extra_files import EXTRA_FILES
from repoprompt.store import SupabaseStore
from repoprompt.tree import NodeKind, TreeNode, build_tree, find_node, iter_nodes
from tests.fakes import FakeSource, FakeSupabase, d, f


def build(source, path="", **kwargs):
    kwargs.setdefault("extra_files", {})
    return asyncio.run(build_tree(source, "acme", "widgets", path, "main", **kwargs))


def test_directory_weight_is_sum_of_children(source):
    nodes = build(source)
    for node in iter_nodes(nodes):
        if node.is_dir:
            assert node.weight == sum(c.weight for c in node.children)
    assert find_node("src", nodes).weight == 7
    assert find_node("src/assets", nodes).weight == 1


def test_listing_order_is_kept(source):
    nodes = build(source)
    assert [n.path for n in nodes] == ["README.md", "src"]
    src = find_node("src", nodes)
    assert [c.name for c in src.children] == ["main.py", "util.py", "assets"]
    assert src.kind is NodeKind.DIRECTORY


def test_failed_file_read_is_isolated(source):
    nodes = build(source)
    broken = find_node("src/assets/broken.txt", nodes)
    assert broken is not None
    assert broken.weight == 0
    assert find_node("src/assets/icon.ico", nodes).weight == 1
    assert find_node("src/main.py", nodes).weight == 3


def test_top_level_listing_failure_is_fatal():
    source = FakeSource(listings={}, files={})
    with pytest.raises(FetchError):
        build(source)


def test_nested_listing_failure_propagates():
    source = FakeSource(
        listings={"": [f("a.txt"), d("missing")]},
        files={"a.txt": "a"},
    )
    with pytest.raises(FetchError):
        build(source)
    # Siblings still ran to completion before the error surfaced
    assert source.reads == ["a.txt"]


def test_root_gets_extra_files_even_when_tables_fail(source):
    db = FakeSupabase()
    db.failing = {"files", "prompts"}
    nodes = build(source, extra_files={"hello.txt": "hello world"}, store=SupabaseStore(db))
    assert len(nodes) == 2 + 1
    assert nodes[-1].path == "hello.txt"
    assert nodes[-1].weight == 2


def test_default_extra_files_are_appended(source):
    nodes = asyncio.run(build_tree(source, "acme", "widgets"))
    assert [n.path for n in nodes[2:]] == list(EXTRA_FILES)


def test_table_rows_become_prefixed_leaves(source):
    db = FakeSupabase()
    db.tables["files"].append({"path": "notes/todo.md", "content": "ship it now"})
    db.tables["prompts"].append(
        {"id": "1", "filename": "api_prompt.md", "content": "be brief", "prompt": "prompt",
         "created_at": "2024-03-16T00:00:00+00:00"}
    )
    nodes = build(source, store=SupabaseStore(db))
    assert [(n.path, n.name, n.weight) for n in nodes[2:]] == [
        ("supabase/notes/todo.md", "todo.md", 3),
        ("prompts/api_prompt.md", "api_prompt.md", 2),
    ]


def test_one_failing_table_does_not_hide_the_other(source):
    db = FakeSupabase()
    db.failing = {"files"}
    db.tables["prompts"].append(
        {"id": "1", "filename": "x_prompt.md", "content": "x", "created_at": "t"}
    )
    nodes = build(source, store=SupabaseStore(db))
    assert [n.path for n in nodes[2:]] == ["prompts/x_prompt.md"]


def test_subdirectory_fetch_has_no_extras(source):
    db = FakeSupabase()
    db.tables["files"].append({"path": "a", "content": "b"})
    nodes = build(source, "src", extra_files={"hello.txt": "hello world"}, store=SupabaseStore(db))
    assert [n.path for n in nodes] == ["src/main.py", "src/util.py", "src/assets"]


def test_rebuild_is_deterministic(source):
    first = [n.to_dict() for n in build(source)]
    second = [n.to_dict() for n in build(source)]
    assert first == second


def test_json_shape_round_trips(source):
    nodes = build(source)
    data = [n.to_dict() for n in nodes]
    assert data[0] == {"name": "README.md", "path": "README.md", "type": "file", "tokens": 3}
    assert data[1]["type"] == "directory"
    assert "children" in data[1]
    assert [TreeNode.from_dict(x) for x in data] == nodes


def test_unreachable_table_is_isolated(source):
    db = FakeSupabase()
    db.unreachable = {"files"}
    db.tables["prompts"].append(
        {"id": "1", "filename": "p.md", "content": "keep me", "created_at": "t"}
    )
    nodes = build(source, store=SupabaseStore(db))
    assert [n.path for n in nodes[2:]] == ["prompts/p.md"]


def test_unreachable_database_still_builds_tree(source):
    db = FakeSupabase()
    db.unreachable = {"files", "prompts"}
    nodes = build(source, extra_files={"hello.txt": "hello world"}, store=SupabaseStore(db))
    assert [n.path for n in nodes] == ["README.md", "src", "hello.txt"]
