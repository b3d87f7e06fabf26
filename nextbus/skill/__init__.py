"""
Voice-skill adapter - maps platform requests onto the next-bus service.
"""

from .dispatcher import SkillDispatcher, build_dispatcher, create_handler
from .handlers import SkillResponse

__all__ = ["SkillDispatcher", "SkillResponse", "build_dispatcher", "create_handler"]
