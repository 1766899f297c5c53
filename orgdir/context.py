"""
===============================================================================
CRC CARD — orgdir/context.py (Per-operation context)
===============================================================================

Responsibilities:
  - Keep operation-scoped context in ContextVars (thread and async safe).
  - Correlate every log line emitted during one directory mutation.
  - Provide small helpers: operation_scope(), get_context_dict().

Collaborators:
  - application.usecases.directory: opens an operation_scope per execute().
  - crosscutting.logger: enriches JSON logs with get_context_dict().

Constraints:
  - Only primitive strings, so the payload is always JSON serializable.
  - Empty strings mean "not available".
===============================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Final, Iterator
from uuid import uuid4

operation_id_var: ContextVar[str] = ContextVar("operation_id", default="")
operation_name_var: ContextVar[str] = ContextVar("operation", default="")

_CTX_OPERATION_ID: Final[str] = "operation_id"
_CTX_OPERATION: Final[str] = "operation"


@contextmanager
def operation_scope(operation: str) -> Iterator[str]:
    """
    Binds a fresh operation id for the duration of the block.

    Nested scopes restore the outer values on exit.
    """
    op_id = uuid4().hex
    name_token = operation_name_var.set(operation)
    id_token = operation_id_var.set(op_id)
    try:
        yield op_id
    finally:
        operation_id_var.reset(id_token)
        operation_name_var.reset(name_token)


def get_context_dict() -> dict[str, str]:
    """Current context as a dict, skipping empty keys."""
    ctx: dict[str, str] = {}

    if val := operation_id_var.get():
        ctx[_CTX_OPERATION_ID] = val
    if val := operation_name_var.get():
        ctx[_CTX_OPERATION] = val

    return ctx
