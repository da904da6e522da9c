"""
Models package initialization.
"""

from .base import Base, BaseModel
from .conversation import Conversation

__all__ = [
    "Base",
    "BaseModel",
    "Conversation",
]
