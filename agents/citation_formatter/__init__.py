"""Citation Formatter agent package.

Normalizes CSL-JSON items and renders bibliographies through citeproc-py.
"""

__all__ = [
    "adapter",
    "app",
    "csl_engine",
    "engine",
    "locales",
]
