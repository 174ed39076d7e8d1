"""Markup helpers: README badges and generated-text filters."""

from readmegen.renderers.badges import BadgeSet, compose_badges
from readmegen.renderers.filters import strip_code_fences

__all__ = ["BadgeSet", "compose_badges", "strip_code_fences"]
