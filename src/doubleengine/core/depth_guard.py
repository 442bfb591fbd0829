"""Depth limiting for recursive descriptor handling.

Bounds two kinds of nesting:
- Annotation unwrapping during introspection (Optional[Annotated[...]])
- Chains of auto-generated doubles (a double answering with a double)

Uses explicit per-call state, no thread-local storage.
Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from doubleengine.constants import MAX_ANNOTATION_DEPTH
from doubleengine.diagnostics import ErrorTemplate, UnresolvableTypeError

__all__ = ["DepthGuard", "DepthLimitExceededError", "check_depth", "depth_clamp"]

logger = logging.getLogger(__name__)


class DepthLimitExceededError(UnresolvableTypeError):
    """Raised when a nesting limit is exceeded.

    Indicates a self-referencing type walked without end, or a pathological
    annotation. Subclasses UnresolvableTypeError because in both cases no
    default value can be produced.
    """


@dataclass(slots=True)
class DepthGuard:
    """Context manager for tracking and limiting recursion depth.

    Usage:
        guard = DepthGuard()
        with guard:
            inner = self._convert(arguments[0], guard)

    Mutability Note:
        Intentionally mutable (not frozen=True). current_depth is
        incremented/decremented on __enter__/__exit__.

    Attributes:
        max_depth: Maximum allowed depth (default: MAX_ANNOTATION_DEPTH)
        current_depth: Current recursion depth
    """

    max_depth: int = MAX_ANNOTATION_DEPTH
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Clamp max_depth against Python recursion limit."""
        self.max_depth = depth_clamp(self.max_depth)

    def __enter__(self) -> DepthGuard:
        """Enter guarded section, increment depth.

        Checks the limit BEFORE incrementing: __exit__ is not called when
        __enter__ raises, so incrementing first would leave the guard
        permanently elevated.
        """
        check_depth(self.current_depth, self.max_depth)
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit guarded section, decrement depth."""
        self.current_depth -= 1


def check_depth(depth: int, max_depth: int) -> None:
    """Raise if depth has reached max_depth.

    Used directly where depth is carried as data (nested double chains)
    rather than tracked on the call stack.

    Raises:
        DepthLimitExceededError: If depth >= max_depth
    """
    if depth >= max_depth:
        raise DepthLimitExceededError(ErrorTemplate.max_depth_exceeded(max_depth))


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Clamp requested depth against Python recursion limit.

    Logs a warning if clamping occurs.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead (default: 50)

    Returns:
        Safe depth value, clamped if necessary
    """
    max_safe_depth = sys.getrecursionlimit() - reserve_frames
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested depth %d exceeds Python recursion limit (%d). Clamping to %d.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
