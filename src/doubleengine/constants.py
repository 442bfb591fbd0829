"""Shared constants for DoubleEngine.

Centralized configuration constants used across the surface, matching and
runtime packages. Placing constants here avoids circular imports and
provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for nested doubles and annotations
- Class naming: Synthesized double class names

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DOUBLE_DEPTH",
    "MAX_ANNOTATION_DEPTH",
    # Class naming
    "CLASS_NAME_PREFIX",
    "CLASS_NAME_SUFFIX_BYTES",
    # Logging
    "LOG_TRUNCATE_REPR",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of auto-generated doubles.
# A method returning an object-typed value answers with a fresh nested double,
# which can in turn answer with another one. Chains are built lazily (one level
# per call), so this bounds descriptor cycles such as `Node.next() -> Node`
# when the caller walks them in a loop.
MAX_DOUBLE_DEPTH: int = 100

# Maximum nesting of type annotations during introspection
# (Optional[Annotated[Optional[...]]] unwrapping).
MAX_ANNOTATION_DEPTH: int = 32

# ============================================================================
# CLASS NAMING
# ============================================================================

# Synthesized classes are named "<prefix>_<Target>_<hex>" unless overridden.
CLASS_NAME_PREFIX: str = "Double"

# Random suffix length in bytes (rendered as 2x hex characters).
CLASS_NAME_SUFFIX_BYTES: int = 4

# ============================================================================
# LOGGING
# ============================================================================

# Argument reprs in debug logs are truncated to keep logs manageable.
LOG_TRUNCATE_REPR: int = 80
