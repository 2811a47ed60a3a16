"""
Flask app: dashboard page plus the JSON API proxying GitHub and Supabase.

Run with ``python -m repoprompt`` or ``flask --app repoprompt.app run``.
"""

import asyncio

from flask import Blueprint, Flask, Response, current_app, jsonify, render_template_string, request

from . import config, localfs
from .contents import resolve_contents
from .dashboard import INDEX_HTML
from .errors import FetchError, RepoPromptError, StoreError
from .github import GitHubSource
from .render import render_markdown, render_xml
from .selection import selected_files, selected_weight, toggle_node
from .store import DEFAULT_CATEGORY, SupabaseStore
from .tree import build_tree, find_node, nodes_from_tree_json

SOURCE_KEY = "repoprompt.source"
STORE_KEY = "repoprompt.store"

bp = Blueprint("repoprompt", __name__)


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.update(config.as_flask_config())
    if overrides:
        app.config.update(overrides)
    app.register_blueprint(bp)
    return app


# -------------------------------------------------------
# Collaborators (created lazily, replaceable in tests)
# -------------------------------------------------------
def get_source() -> GitHubSource:
    source = current_app.extensions.get(SOURCE_KEY)
    if source is None:
        source = GitHubSource(
            token=current_app.config["GITHUB_TOKEN"],
            timeout=current_app.config["REQUEST_TIMEOUT"],
        )
        current_app.extensions[SOURCE_KEY] = source
    return source


def get_store() -> SupabaseStore:
    store = current_app.extensions.get(STORE_KEY)
    if store is None:
        store = SupabaseStore.from_config(
            current_app.config["SUPABASE_URL"], current_app.config["SUPABASE_KEY"]
        )
        current_app.extensions[STORE_KEY] = store
    return store


def _store_or_none():
    try:
        return get_store()
    except StoreError as e:
        current_app.logger.warning("Continuing without database rows: %s", e)
        return None


def _repo_coordinates(source: dict) -> tuple[str, str, str]:
    cfg = current_app.config
    owner = source.get("owner") or cfg["GITHUB_OWNER"]
    repo = source.get("repo") or cfg["GITHUB_REPO"]
    branch = source.get("branch") or cfg["GITHUB_BRANCH"] or "main"
    return owner, repo, branch


def _json_body() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


@bp.app_errorhandler(RepoPromptError)
def handle_repoprompt_error(e: RepoPromptError):
    if e.status_code >= 500:
        current_app.logger.error("%s: %s", type(e).__name__, e)
    return jsonify({"error": str(e)}), e.status_code


# -------------------------------------------------------
# Dashboard
# -------------------------------------------------------
@bp.route("/")
def index():
    return render_template_string(INDEX_HTML)


# -------------------------------------------------------
# Repository tree and contents
# -------------------------------------------------------
@bp.route("/api/github-files")
async def api_github_files():
    """
    Query params: owner, repo, branch (default from config) and path
    (default root). Returns the token-weighted tree as nested JSON.
    """
    owner, repo, branch = _repo_coordinates(request.args)
    path = request.args.get("path", "")
    if not owner or not repo:
        return jsonify({"error": "Missing repository information"}), 400

    current_app.logger.info("Starting fetch for %s/%s, path: %s", owner, repo, path or "root")
    try:
        nodes = await build_tree(
            get_source(), owner, repo, path, branch,
            store=_store_or_none() if path == "" else None,
        )
    except FetchError as e:
        current_app.logger.error("Error fetching GitHub files: %s", e)
        return jsonify({"error": "Failed to fetch repository contents", "detail": str(e)}), 500

    return jsonify([n.to_dict() for n in nodes])


async def _fetch_contents(paths: list[str], data: dict):
    owner, repo, branch = _repo_coordinates(data)
    needs_store = any(p.startswith(("prompts/", "supabase/")) for p in paths)
    return await resolve_contents(
        paths,
        source=get_source(),
        owner=owner,
        repo=repo,
        branch=branch,
        store=_store_or_none() if needs_store else None,
    )


@bp.route("/api/file-contents", methods=["POST"])
async def api_file_contents():
    """Receives JSON: { "paths": [...], "owner"?, "repo"?, "branch"? }."""
    data = _json_body()
    paths = data.get("paths")
    if not isinstance(paths, list):
        return jsonify({"error": "Paths array is required"}), 400

    contents, errors = await _fetch_contents(paths, data)
    if errors:
        return jsonify({"error": "Failed to fetch some files", "errors": errors}), 500
    return jsonify(contents)


@bp.route("/api/selection", methods=["POST"])
def api_selection():
    """
    Receives JSON: { "tree": [...], "selected": [...], "path": str, "checked": bool }.
    Returns the new selection and its token total.
    """
    data = _json_body()
    nodes = nodes_from_tree_json(data.get("tree") or [])
    selection = frozenset(data.get("selected") or [])
    path = data.get("path")
    if path:
        node = find_node(path, nodes)
        if node is None:
            return jsonify({"error": f"Unknown path: {path}"}), 400
        selection = toggle_node(selection, node, bool(data.get("checked")))
    return jsonify(
        {
            "selected": sorted(selection),
            "total_tokens": selected_weight(selection, nodes),
        }
    )


@bp.route("/api/export", methods=["POST"])
async def api_export():
    """
    Receives JSON: { "tree", "selected", "format": "markdown"|"xml",
    "include_contents", "prompt", "owner"?, "repo"?, "branch"? }.
    """
    data = _json_body()
    fmt = data.get("format", "markdown")
    if fmt not in ("markdown", "xml"):
        return jsonify({"error": f"Unknown format: {fmt}"}), 400

    nodes = nodes_from_tree_json(data.get("tree") or [])
    selection = frozenset(data.get("selected") or [])

    contents = None
    if fmt == "xml" or data.get("include_contents"):
        paths = [n.path for n in selected_files(selection, nodes)]
        contents, errors = await _fetch_contents(paths, data)
        if errors:
            return jsonify({"error": "Failed to fetch some files", "errors": errors}), 500

    if fmt == "markdown":
        return Response(render_markdown(selection, nodes, contents), mimetype="text/markdown")

    categories: dict[str, str] = {}
    store = _store_or_none()
    if store is not None:
        try:
            categories = await asyncio.to_thread(store.prompt_categories)
        except StoreError as e:
            current_app.logger.warning("Prompt categories unavailable: %s", e)
    body = render_xml(selection, nodes, contents, categories, prompt=data.get("prompt"))
    return Response(body, mimetype="application/xml")


# -------------------------------------------------------
# Prompts
# -------------------------------------------------------
@bp.route("/api/prompts")
def api_prompts():
    return jsonify(get_store().list_prompts())


@bp.route("/api/get-prompt")
def api_get_prompt():
    prompt = get_store().get_prompt(
        id=request.args.get("id"), filename=request.args.get("filename")
    )
    return jsonify(prompt)


@bp.route("/api/upload-prompt", methods=["POST"])
def api_upload_prompt():
    data = _json_body()
    prompt = get_store().create_prompt(
        data.get("filename", ""),
        data.get("content", ""),
        data.get("prompt") or DEFAULT_CATEGORY,
    )
    current_app.logger.info("Created prompt %s", prompt.get("filename"))
    return jsonify(prompt)


@bp.route("/api/update-prompt", methods=["POST"])
def api_update_prompt():
    data = _json_body()
    prompt = get_store().update_prompt(
        data.get("id", ""),
        filename=data.get("filename"),
        content=data.get("content"),
        category=data.get("prompt"),
    )
    return jsonify(prompt)


@bp.route("/api/delete-prompt", methods=["POST"])
def api_delete_prompt():
    get_store().delete_prompt(_json_body().get("id", ""))
    return jsonify({"success": True})


# -------------------------------------------------------
# Stored files (Supabase "files" table)
# -------------------------------------------------------
@bp.route("/api/get-file")
def api_get_file():
    path = request.args.get("path")
    if not path:
        return jsonify({"error": "Path is required"}), 400
    return jsonify(get_store().get_file(path))


@bp.route("/api/store-file", methods=["POST"])
def api_store_file():
    data = _json_body()
    path, content = data.get("path"), data.get("content")
    if not path or not isinstance(content, str):
        return jsonify({"error": "path and content are required"}), 400
    return jsonify(get_store().store_file(path, content))


# -------------------------------------------------------
# Local project files
# -------------------------------------------------------
@bp.route("/api/files")
def api_files():
    return jsonify(localfs.scan_directory(current_app.config["LOCAL_ROOT"]))


@bp.route("/api/file")
def api_file():
    root = current_app.config["LOCAL_ROOT"]
    return jsonify({"content": localfs.read_file(root, request.args.get("path", ""))})


@bp.route("/api/save-file", methods=["POST"])
def api_save_file():
    data = _json_body()
    content = data.get("content")
    if not isinstance(content, str):
        return jsonify({"error": "Content must be a string"}), 400
    localfs.save_file(current_app.config["LOCAL_ROOT"], data.get("path", ""), content)
    return jsonify({"success": True})
