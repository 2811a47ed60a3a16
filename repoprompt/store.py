"""
Supabase-backed persistence for the ``files`` and ``prompts`` tables.

Rows come back as plain dicts, the way PostgREST returns them.
"""

import logging

import httpx
from postgrest.exceptions import APIError
from supabase import Client, SupabaseException, create_client

from .errors import DuplicateRecord, InvalidRecord, RecordNotFound, StoreError

log = logging.getLogger(__name__)

FILES_TABLE = "files"
PROMPTS_TABLE = "prompts"

# Values allowed by the ``valid_prompt_types`` check constraint
CATEGORIES = ("prompt", "prd", "instructions", "example")
DEFAULT_CATEGORY = "prompt"

PROMPT_COLUMNS = "id, filename, content, created_at, prompt"


def _execute(query, what: str) -> list[dict]:
    try:
        resp = query.execute()
    except APIError as e:
        log.error("Supabase error while %s: %s", what, e)
        raise StoreError(f"Failed to {what}") from e
    except httpx.HTTPError as e:
        log.error("Supabase unreachable while %s: %s", what, e)
        raise StoreError(f"Failed to {what}: database unreachable") from e
    return resp.data or []


def _check_category(category: str) -> None:
    if category not in CATEGORIES:
        raise InvalidRecord(
            f"Invalid prompt type '{category}', expected one of: {', '.join(CATEGORIES)}"
        )


class SupabaseStore:
    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_config(cls, url: str, key: str) -> "SupabaseStore":
        if not url or not key:
            raise StoreError("Supabase is not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")
        try:
            return cls(create_client(url, key))
        except SupabaseException as e:
            raise StoreError(f"Invalid Supabase configuration: {e}") from e

    # ---------------------------------------------------
    # files
    # ---------------------------------------------------
    def list_files(self) -> list[dict]:
        return _execute(
            self.client.table(FILES_TABLE).select("path, content"), "list files"
        )

    def get_file(self, path: str) -> dict:
        rows = _execute(
            self.client.table(FILES_TABLE).select("*").eq("path", path).limit(1),
            "fetch file",
        )
        if not rows:
            raise RecordNotFound("File not found")
        return rows[0]

    def store_file(self, path: str, content: str) -> dict:
        rows = _execute(
            self.client.table(FILES_TABLE).upsert(
                {"path": path, "content": content}, on_conflict="path"
            ),
            "store file",
        )
        return rows[0] if rows else {"path": path, "content": content}

    # ---------------------------------------------------
    # prompts
    # ---------------------------------------------------
    def list_prompts(self) -> list[dict]:
        """All prompts, newest first."""
        return _execute(
            self.client.table(PROMPTS_TABLE)
            .select(PROMPT_COLUMNS)
            .order("created_at", desc=True),
            "list prompts",
        )

    def get_prompt(self, id: str | None = None, filename: str | None = None) -> dict:
        if not id and not filename:
            raise InvalidRecord("Either ID or filename is required")
        query = self.client.table(PROMPTS_TABLE).select(PROMPT_COLUMNS)
        query = query.eq("id", id) if id else query.eq("filename", filename)
        rows = _execute(query.limit(1), "fetch prompt")
        if not rows:
            raise RecordNotFound("Prompt not found")
        return rows[0]

    def _filename_taken(self, filename: str, exclude_id: str | None = None) -> bool:
        query = self.client.table(PROMPTS_TABLE).select("id").eq("filename", filename)
        if exclude_id:
            query = query.neq("id", exclude_id)
        return bool(_execute(query.limit(1), "check filename"))

    def create_prompt(self, filename: str, content: str, category: str = DEFAULT_CATEGORY) -> dict:
        if not filename or not content:
            raise InvalidRecord("Filename and content are required")
        _check_category(category)
        if self._filename_taken(filename):
            raise DuplicateRecord("A file with this name already exists")
        rows = _execute(
            self.client.table(PROMPTS_TABLE).insert(
                {"filename": filename, "content": content, "prompt": category}
            ),
            "upload prompt",
        )
        if not rows:
            raise StoreError("Failed to upload prompt")
        return rows[0]

    def update_prompt(
        self,
        id: str,
        filename: str | None = None,
        content: str | None = None,
        category: str | None = None,
    ) -> dict:
        changes = {}
        if filename:
            changes["filename"] = filename
        if content:
            changes["content"] = content
        if category:
            _check_category(category)
            changes["prompt"] = category
        if not id or not changes:
            raise InvalidRecord("ID and at least one field (filename, content or prompt) are required")

        if filename and self._filename_taken(filename, exclude_id=id):
            raise DuplicateRecord("A prompt with this filename already exists")

        rows = _execute(
            self.client.table(PROMPTS_TABLE).update(changes).eq("id", id),
            "update prompt",
        )
        if not rows:
            raise RecordNotFound("Prompt not found")
        return rows[0]

    def delete_prompt(self, id: str) -> None:
        if not id:
            raise InvalidRecord("ID is required")
        _execute(self.client.table(PROMPTS_TABLE).delete().eq("id", id), "delete prompt")

    def get_prompt_content(self, filename: str) -> str:
        return self.get_prompt(filename=filename).get("content") or ""

    def prompt_categories(self) -> dict[str, str]:
        """filename -> category, for grouping files in the XML export."""
        return {
            row["filename"]: row.get("prompt") or DEFAULT_CATEGORY
            for row in self.list_prompts()
        }
