"""
Repository tree fetcher/aggregator.

``build_tree`` walks a GitHub directory recursively, fetching every file to
count its tokens, and rolls the counts up into the directories. Siblings are
fetched concurrently; the result keeps the order of the upstream listing.
At the root, bundled extra files and the rows of the ``files`` and
``prompts`` tables are appended as additional leaves.
"""

import asyncio
import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Protocol

from .errors import LeafFetchError, StoreError
from .extra_files import EXTRA_FILES
from .github import RepoEntry
from .tokens import count_tokens

log = logging.getLogger(__name__)

SUPABASE_PREFIX = "supabase/"
PROMPTS_PREFIX = "prompts/"


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class TreeNode:
    name: str
    path: str
    kind: NodeKind
    weight: int = 0
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    def to_dict(self) -> dict:
        d = {"name": self.name, "path": self.path, "type": self.kind.value}
        if self.is_dir:
            d["children"] = [c.to_dict() for c in self.children]
        d["tokens"] = self.weight
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "TreeNode":
        kind = NodeKind(data.get("type", "file"))
        children = [cls.from_dict(c) for c in data.get("children") or []]
        return cls(
            name=data.get("name") or posixpath.basename(data["path"]),
            path=data["path"],
            kind=kind,
            weight=int(data.get("tokens") or 0),
            children=children if kind is NodeKind.DIRECTORY else [],
        )


class RepoSource(Protocol):
    def list_directory(self, owner: str, repo: str, path: str, branch: str) -> list[RepoEntry]: ...

    def read_file(self, owner: str, repo: str, path: str, branch: str) -> str: ...


class RowSource(Protocol):
    def list_files(self) -> list[dict]: ...

    def list_prompts(self) -> list[dict]: ...


def file_node(path: str, content: str, name: str | None = None) -> TreeNode:
    return TreeNode(
        name=name or posixpath.basename(path),
        path=path,
        kind=NodeKind.FILE,
        weight=count_tokens(content or ""),
    )


def nodes_from_tree_json(data: list[dict]) -> list[TreeNode]:
    return [TreeNode.from_dict(d) for d in data]


def iter_nodes(nodes: list[TreeNode]) -> Iterator[TreeNode]:
    """Depth-first, pre-order."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_node(path: str, nodes: list[TreeNode]) -> TreeNode | None:
    for node in iter_nodes(nodes):
        if node.path == path:
            return node
    return None


# -------------------------------------------------------
# Fetching
# -------------------------------------------------------
async def _file_weight(source: RepoSource, owner: str, repo: str, path: str, branch: str) -> int:
    try:
        content = await asyncio.to_thread(source.read_file, owner, repo, path, branch)
    except LeafFetchError as e:
        log.warning("Failed to count tokens for %s: %s", path, e)
        return 0
    tokens = count_tokens(content)
    log.debug("Counted %d tokens in %s", tokens, path)
    return tokens


async def _build_entry(
    source: RepoSource, owner: str, repo: str, entry: RepoEntry, branch: str
) -> TreeNode:
    if entry.is_dir:
        children = await build_tree(source, owner, repo, entry.path, branch)
        return TreeNode(
            name=entry.name,
            path=entry.path,
            kind=NodeKind.DIRECTORY,
            weight=sum(c.weight for c in children),
            children=children,
        )
    weight = await _file_weight(source, owner, repo, entry.path, branch)
    return TreeNode(name=entry.name, path=entry.path, kind=NodeKind.FILE, weight=weight)


async def _read_rows(read, table: str) -> list[dict]:
    try:
        return await asyncio.to_thread(read)
    except StoreError as e:
        log.warning("Skipping %s table: %s", table, e)
        return []


async def _row_nodes(store: RowSource | None) -> list[TreeNode]:
    if store is None:
        return []
    files, prompts = await asyncio.gather(
        _read_rows(store.list_files, "files"),
        _read_rows(store.list_prompts, "prompts"),
    )
    nodes = [
        file_node(SUPABASE_PREFIX + row["path"], row.get("content") or "")
        for row in files
    ]
    nodes.extend(
        file_node(PROMPTS_PREFIX + row["filename"], row.get("content") or "", name=row["filename"])
        for row in prompts
    )
    return nodes


async def build_tree(
    source: RepoSource,
    owner: str,
    repo: str,
    path: str = "",
    branch: str = "main",
    *,
    extra_files: dict[str, str] | None = None,
    store: RowSource | None = None,
) -> list[TreeNode]:
    """
    Fetch the tree under ``path``.

    Raises FetchError when a directory listing fails. A file whose content
    cannot be read is kept with weight 0, and a table that cannot be read
    contributes no nodes.
    """
    log.info("Fetching contents for: %s", path or "root")
    entries = await asyncio.to_thread(source.list_directory, owner, repo, path, branch)

    # Wait for every sibling before surfacing a failure
    results = await asyncio.gather(
        *(_build_entry(source, owner, repo, e, branch) for e in entries),
        return_exceptions=True,
    )
    for r in results:
        if isinstance(r, BaseException):
            raise r
    nodes: list[TreeNode] = list(results)

    if path == "":
        extra = EXTRA_FILES if extra_files is None else extra_files
        nodes.extend(file_node(p, content) for p, content in extra.items())
        nodes.extend(await _row_nodes(store))

    return nodes
