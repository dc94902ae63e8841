"""core package initialization.

Making `core` an explicit package so imports like `import core.data`
work reliably when running `main.py` from the project root.
"""

__all__ = ["constants", "data", "save", "tuning"]
