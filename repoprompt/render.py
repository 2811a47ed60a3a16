"""
Prompt documents built from a selection: a Markdown report and a
tag-delimited XML prompt grouped by purpose.
"""

import os
import posixpath
import re
from datetime import datetime
from xml.sax.saxutils import quoteattr

from .selection import selected_files, selected_weight
from .tree import TreeNode, iter_nodes

EXT_TO_LANG = {
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".jsx": "jsx",
    ".tsx": "tsx",
    ".json": "json",
    ".md": "markdown",
    ".java": "java",
    ".c": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".rb": "ruby",
    ".php": "php",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".sql": "sql",
    ".sh": "bash",
    ".zsh": "bash",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".toml": "toml",
    ".rs": "rust",
    ".swift": "swift",
}

# PromptRecord category -> XML section
SECTION_FOR_CATEGORY = {
    "prompt": "purpose",
    "instructions": "instructions",
    "prd": "prd",
    "example": "examples",
}
CODEBASE = "codebase"
XML_SECTIONS = ("purpose", "instructions", "prd", CODEBASE, "examples")


def detect_language(file_path: str) -> str:
    _, ext = os.path.splitext(file_path)
    return EXT_TO_LANG.get(ext.lower(), "")


def _dynamic_fence(text: str, lang: str) -> str:
    """Use a backtick fence longer than any run inside content."""
    longest = 0
    for m in re.finditer(r"`+", text):
        longest = max(longest, len(m.group(0)))
    fence = "`" * max(3, longest + 1)
    return f"{fence}{lang}\n{text}\n{fence}\n"


def render_markdown(
    selection: frozenset[str],
    nodes: list[TreeNode],
    contents: dict[str, str] | None = None,
    now: datetime | None = None,
) -> str:
    """
    Summary table of the selection, optionally followed by file contents.

    Selected directories are listed in the table with their aggregated weight
    but are left out of the totals.
    """
    now = now or datetime.now()
    files = selected_files(selection, nodes)
    lines = [
        f"# Selected Files ({now:%Y-%m-%d %H:%M:%S})",
        "",
        f"Total files: {len(files)}  ",
        f"Total tokens: {selected_weight(selection, nodes):,}",
        "",
        "| File Path | Type | Tokens |",
        "|-----------|------|--------|",
    ]
    for node in iter_nodes(nodes):
        if node.path in selection:
            kind = "Directory" if node.is_dir else "File"
            lines.append(f"| {node.path} | {kind} | {node.weight:,} |")

    if contents is not None:
        lines += ["", "## File Contents", ""]
        for node in files:
            text = contents.get(node.path)
            if not text:
                continue
            lines += [f"### {node.path}", "", _dynamic_fence(text.strip(), detect_language(node.path))]

    return "\n".join(lines)


def section_for(path: str, categories: dict[str, str]) -> str:
    category = categories.get(posixpath.basename(path))
    return SECTION_FOR_CATEGORY.get(category, CODEBASE)


def render_xml(
    selection: frozenset[str],
    nodes: list[TreeNode],
    contents: dict[str, str],
    categories: dict[str, str],
    prompt: str | None = None,
) -> str:
    """
    ``categories`` maps a prompt filename to its category. Files whose
    basename is not a known prompt go into <codebase>.
    """
    grouped: dict[str, list[str]] = {s: [] for s in XML_SECTIONS}
    if prompt and prompt.strip():
        grouped["purpose"].append(prompt.strip())

    for node in selected_files(selection, nodes):
        body = contents.get(node.path, "").rstrip("\n")
        grouped[section_for(node.path, categories)].append(
            f"<file path={quoteattr(node.path)}>\n{body}\n</file>"
        )

    out = ["<prompt>"]
    for section in XML_SECTIONS:
        if grouped[section]:
            out.append(f"<{section}>")
            out.extend(grouped[section])
            out.append(f"</{section}>")
    out.append("</prompt>")
    return "\n".join(out) + "\n"
