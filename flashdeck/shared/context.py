"""
Request-scoped context variables.

The tracing middleware fills these in once per request; error responses and
log records read them back without having to thread ids through call chains.
"""

from contextvars import ContextVar

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_trace_id() -> str:
    """Return the trace id of the current request, or an empty string."""
    return trace_id_var.get()


def get_request_id() -> str:
    """Return the request id of the current request, or an empty string."""
    return request_id_var.get()


def bind_request(request_id: str, trace_id: str | None = None) -> None:
    """Bind request and trace ids for the current context.

    Args:
        request_id: Incoming or generated request id.
        trace_id: Upstream trace id; falls back to ``request_id``.
    """
    request_id_var.set(request_id)
    trace_id_var.set(trace_id or request_id)
