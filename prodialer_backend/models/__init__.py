from __future__ import annotations

"""
Models package for the ProDialer backend.

Imports and exposes ORM models so they are registered with Base.metadata.
"""

from prodialer_backend.db import Base
from .contact import ContactRecord  # noqa: F401

__all__ = [
    "Base",
    "ContactRecord",
]
