"""
Shared module - cross-cutting concerns used by every domain module.

- Context variables for request/trace ids
- Unified error taxonomy
- Loguru-based logging
"""

from .context import bind_request, get_request_id, get_trace_id, request_id_var, trace_id_var

__all__ = [
    "bind_request",
    "get_request_id",
    "get_trace_id",
    "request_id_var",
    "trace_id_var",
]
