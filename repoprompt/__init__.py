"""
repoprompt: a Flask dashboard to browse a GitHub repository, pick files and
saved prompts, and assemble them into a Markdown or XML prompt for LLMs.
"""

__version__ = "0.1.0"
