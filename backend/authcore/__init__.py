"""Expose the application factory at package level.

Provide convenient access to :func:`authcore.factory.create_app` so callers
(gunicorn, the Flask CLI, tests) can ``from authcore import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
