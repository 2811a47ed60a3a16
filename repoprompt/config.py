"""Environment-driven settings. Values are copied into ``app.config``."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# -------------------------------------------------------
# GitHub
# -------------------------------------------------------
GITHUB_API = "https://api.github.com"
GITHUB_RAW = "https://raw.githubusercontent.com"
GITHUB_OWNER = os.getenv("GITHUB_OWNER", "")
GITHUB_REPO = os.getenv("GITHUB_REPO", "")
GITHUB_BRANCH = os.getenv("GITHUB_BRANCH", "main")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN", "")
USER_AGENT = "repoprompt/0.1"

REQUEST_TIMEOUT = float(os.getenv("REPOPROMPT_REQUEST_TIMEOUT", "30"))

# -------------------------------------------------------
# Supabase
# -------------------------------------------------------
SUPABASE_URL = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY", "")

# -------------------------------------------------------
# Local project browsing / dev server
# -------------------------------------------------------
LOCAL_ROOT = Path(os.getenv("REPOPROMPT_ROOT", Path.cwd())).resolve()
HOST = os.getenv("REPOPROMPT_HOST", "127.0.0.1")
PORT = int(os.getenv("REPOPROMPT_PORT", "5000"))


def as_flask_config() -> dict:
    return {
        "GITHUB_OWNER": GITHUB_OWNER,
        "GITHUB_REPO": GITHUB_REPO,
        "GITHUB_BRANCH": GITHUB_BRANCH,
        "GITHUB_TOKEN": GITHUB_TOKEN,
        "REQUEST_TIMEOUT": REQUEST_TIMEOUT,
        "SUPABASE_URL": SUPABASE_URL,
        "SUPABASE_KEY": SUPABASE_KEY,
        "LOCAL_ROOT": LOCAL_ROOT,
    }
