"""Files bundled with the app and spliced into the root of every tree."""

import json

EXTRA_FILES: dict[str, str] = {
    "src/config/settings.json": json.dumps({"theme": "dark", "autosave": True}, indent=2),
    "src/docs/README.md": (
        "# Project Documentation\n"
        "\n"
        "This is the project's documentation for extra configurations."
    ),
}


def is_extra_file(path: str, extra: dict[str, str] | None = None) -> bool:
    return path in (EXTRA_FILES if extra is None else extra)


def get_extra_file_content(path: str, extra: dict[str, str] | None = None) -> str:
    return (EXTRA_FILES if extra is None else extra).get(path, "")
