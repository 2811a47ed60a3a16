"""Resolve selected tree paths to their text, whatever backs them."""

import asyncio
import logging

from .errors import RepoPromptError, StoreError
from .extra_files import EXTRA_FILES
from .tree import PROMPTS_PREFIX, SUPABASE_PREFIX, RepoSource

log = logging.getLogger(__name__)


async def _prompt_content(store, filename: str) -> str:
    """A prompt that cannot be read resolves to empty text."""
    if store is None:
        log.warning("No store configured, prompt %s left empty", filename)
        return ""
    try:
        return await asyncio.to_thread(store.get_prompt_content, filename)
    except StoreError as e:
        log.warning("Failed to fetch prompt %s: %s", filename, e)
        return ""


async def resolve_content(
    path: str,
    *,
    source: RepoSource,
    owner: str,
    repo: str,
    branch: str = "main",
    store=None,
    extra_files: dict[str, str] | None = None,
) -> str:
    """
    ``prompts/<filename>`` and ``supabase/<path>`` come from the store, bundled
    extra files from memory, everything else from the repository. A missing
    prompt reads as empty text; any other failure raises.
    """
    extra = EXTRA_FILES if extra_files is None else extra_files
    if path.startswith(PROMPTS_PREFIX):
        return await _prompt_content(store, path[len(PROMPTS_PREFIX):])
    if path.startswith(SUPABASE_PREFIX):
        if store is None:
            raise StoreError(f"No store configured for {path}")
        row = await asyncio.to_thread(store.get_file, path[len(SUPABASE_PREFIX):])
        return row.get("content") or ""
    if path in extra:
        return extra[path]
    return await asyncio.to_thread(source.read_file, owner, repo, path, branch)


async def resolve_contents(paths: list[str], **kwargs) -> tuple[dict[str, str], list[str]]:
    """Fetch every path concurrently. Returns (contents, error messages)."""
    results = await asyncio.gather(
        *(resolve_content(p, **kwargs) for p in paths), return_exceptions=True
    )
    contents: dict[str, str] = {}
    errors: list[str] = []
    for path, result in zip(paths, results):
        if isinstance(result, RepoPromptError):
            log.error("Error fetching %s: %s", path, result)
            errors.append(f"Failed to fetch {path}: {result}")
        elif isinstance(result, BaseException):
            raise result
        else:
            contents[path] = result
    return contents, errors
