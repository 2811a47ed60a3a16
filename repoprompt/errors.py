"""Exception types shared by the fetchers, the store and the HTTP layer."""


class RepoPromptError(Exception):
    """Base class for every error this package raises on purpose."""

    status_code = 500


class FetchError(RepoPromptError):
    """A directory listing could not be obtained. Aborts the whole tree build."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class LeafFetchError(RepoPromptError):
    """A single file read failed. The tree builder absorbs it as weight 0."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class StoreError(RepoPromptError):
    pass


class RecordNotFound(StoreError):
    status_code = 404


class DuplicateRecord(StoreError):
    status_code = 400


class InvalidRecord(StoreError):
    status_code = 400


class InvalidPath(RepoPromptError):
    """A local path is missing or escapes the project root."""

    status_code = 400
