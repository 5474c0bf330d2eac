"""
Top‑level package for the Meals Finder API.

This file makes ``meals_finder_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``meals_finder_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
