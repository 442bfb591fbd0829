"""Core utilities shared across surface and runtime layers.

Isolating these utilities keeps the dependency graph clean:

    diagnostics <- core <- surface <- matching <- runtime

Exports:
    DepthGuard: Context manager for recursion depth limiting
    DepthLimitExceededError: Exception raised when depth limit exceeded
    check_depth: Depth check for depth carried as data

Python 3.13+.
"""

from .depth_guard import DepthGuard, DepthLimitExceededError, check_depth, depth_clamp

__all__ = ["DepthGuard", "DepthLimitExceededError", "check_depth", "depth_clamp"]
