def count_tokens(text: str) -> int:
    """Number of maximal non-whitespace runs in ``text``."""
    return len(text.split())
