"""
Server package exposing FastAPI app and room registry.
"""

from .app import app  # noqa: F401
from .registry import RoomRegistry  # noqa: F401
