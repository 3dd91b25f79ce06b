"""PhotoScout Shared Module.

This package contains shared utilities, constants, instrumentation and error
handling used across PhotoScout.
"""

__all__ = ["cache_utils", "errors", "instrumentation", "logging"]
