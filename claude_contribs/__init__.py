"""
Claude Contribs.

GitHub-style contribution maps and usage statistics for Claude Code logs.
"""

__version__ = "1.1.0"
