"""Error types shared by the GitHub client and the comment parser.

Every error carries an ``error_type`` (a short description of what failed),
an ``error_context`` mapping with the inputs involved, and optionally the
original exception as ``cause``. The message is rendered from a template
selected by the error kind.
"""

import json
from enum import Enum
from typing import Any, Dict, Optional


CIRCULAR_MARKER = '[Circular]'
UNSERIALIZABLE_PLACEHOLDER = '[Unserializable context]'


class ErrorKind(Enum):
    """Kinds of failure the core can report."""
    PARSING = 'parsing'  # malformed or missing local input
    SERVICE = 'service'  # remote call failed


_MESSAGE_TEMPLATES = {
    ErrorKind.PARSING: 'Cannot parse {error_type} using {context}',
    ErrorKind.SERVICE: '{error_type} using {context}',
}


def _make_json_safe(value: Any, ancestors: set) -> Any:
    """Return a copy of ``value`` that json can always encode.

    Only containers on the current path are tracked, so an object referenced
    twice from different branches is rendered twice, not as a cycle.
    """
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value

    if isinstance(value, (dict, list, tuple, set, frozenset)):
        if id(value) in ancestors:
            return CIRCULAR_MARKER
        ancestors.add(id(value))
        try:
            if isinstance(value, dict):
                return {str(k): _make_json_safe(v, ancestors) for k, v in value.items()}
            if isinstance(value, (set, frozenset)):
                items = sorted(value, key=repr)
            else:
                items = value
            return [_make_json_safe(v, ancestors) for v in items]
        finally:
            ancestors.discard(id(value))

    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')

    if hasattr(value, 'isoformat'):
        return value.isoformat()

    return str(value)


def safe_serialize(context: Any) -> str:
    """Serialize an error context to pretty JSON without ever raising."""
    try:
        return json.dumps(_make_json_safe(context, set()), indent=2, ensure_ascii=False)
    except Exception:
        return UNSERIALIZABLE_PLACEHOLDER


def format_error_message(kind: ErrorKind, error_type: str, error_context: Dict[str, Any]) -> str:
    """Render the message for an error of the given kind."""
    template = _MESSAGE_TEMPLATES[kind]
    return template.format(error_type=error_type, context=safe_serialize(error_context))


class AppError(Exception):
    """Base class for all errors raised by this package."""

    kind = ErrorKind.SERVICE

    def __init__(self, error_type: str, error_context: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        """Build the error.

        Args:
            error_type: Short description of what failed
            error_context: Inputs relevant to the failure, rendered into the message
            cause: The original exception, if this error wraps one
        """
        self.error_type = error_type
        self.error_context = error_context if error_context is not None else {}
        self.cause = cause
        super().__init__(format_error_message(self.kind, error_type, self.error_context))
        if cause is not None:
            self.__cause__ = cause


class ParsingError(AppError):
    """Local input could not be parsed (empty body, bad PR URL, bad remote URL)."""
    kind = ErrorKind.PARSING


class ServiceError(AppError):
    """A remote call failed, including "no PR found" for a branch."""
    kind = ErrorKind.SERVICE


def is_domain_error(error: BaseException) -> bool:
    """Check whether an exception is already one of ours and must not be wrapped again."""
    return isinstance(error, AppError)
