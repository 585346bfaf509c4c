"""
LeetCode Solution Tracker backend package.

This package exposes a FastAPI application that stores solved problems, their
notes and solutions, and answers questions about a solution with a heuristic
code-review assistant.
"""

__all__ = ["__version__"]

__version__ = "1.0.0"
