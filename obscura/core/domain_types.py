"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - StoryId wraps a 64-bit signed integer — never use bare int for ids in domain logic
    - Field limits are defined once here and shared by validation, ORM and migrations

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

StoryId = NewType("StoryId", int)

STORY_ID_MIN = -(2 ** 63)
STORY_ID_MAX = 2 ** 63 - 1


# ─── Field Limits ────────────────────────────────────────────────

TITLE_MAX_LENGTH = 100
