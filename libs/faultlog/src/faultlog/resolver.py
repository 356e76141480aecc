"""Resolve an exception chain into a user-facing :class:`ErrorSummary`."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from faultlog.errors import UserFacingError
from faultlog.summary import ErrorSummary

DomainPredicate = Callable[[BaseException], bool]


def is_user_facing(exc: BaseException) -> bool:
    return isinstance(exc, UserFacingError)


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and then each exception it was caused by, outermost first.

    Follows ``__cause__``, falling back to ``__context__`` unless context was
    suppressed with ``raise ... from None``. A node is never yielded twice,
    so cyclic chains terminate.
    """
    seen: set[int] = set()
    node: BaseException | None = exc
    while node is not None and id(node) not in seen:
        seen.add(id(node))
        yield node
        if node.__cause__ is not None:
            node = node.__cause__
        elif not node.__suppress_context__:
            node = node.__context__
        else:
            node = None


def root_cause(exc: BaseException) -> BaseException:
    """Return the deepest exception in the chain of *exc*."""
    deepest = exc
    for deepest in iter_causes(exc):
        pass
    return deepest


def exception_text(exc: BaseException) -> str:
    """``str(exc)``, or a placeholder when the exception's ``__str__`` fails."""
    try:
        return str(exc)
    except Exception:
        return f"<unprintable {type(exc).__name__} object>"


def root_cause_message(exc: BaseException) -> str:
    """Describe the deepest cause as ``"TypeName: message"``.

    >>> root_cause_message(KeyError("x"))
    "KeyError: 'x'"
    >>> root_cause_message(RuntimeError())
    'RuntimeError'
    """
    root = root_cause(exc)
    text = exception_text(root)
    name = type(root).__name__
    return f"{name}: {text}" if text else name


class ErrorResolver:
    """Find the first user-facing error in a cause chain.

    Args:
        is_domain_error: Predicate marking the exceptions whose message may be
            shown to users. Defaults to ``isinstance(exc, UserFacingError)``.
    """

    def __init__(self, is_domain_error: DomainPredicate = is_user_facing) -> None:
        self._is_domain_error = is_domain_error

    def find(self, exc: BaseException) -> BaseException | None:
        for node in iter_causes(exc):
            if self._is_domain_error(node):
                return node
        return None

    def resolve(self, exc: BaseException) -> ErrorSummary:
        """Build a summary for *exc*. Never raises.

        With a user-facing error in the chain, its message is used and the
        original exception is kept as the cause. Otherwise the message
        describes the root cause, and the cause is that root (which is *exc*
        itself for an unchained exception).
        """
        match = self.find(exc)
        if match is not None:
            return ErrorSummary(message=exception_text(match), cause=exc)
        return ErrorSummary(message=root_cause_message(exc), cause=root_cause(exc))


_default_resolver = ErrorResolver()


def resolve(exc: BaseException) -> ErrorSummary:
    """Resolve *exc* with the default :class:`UserFacingError` predicate."""
    return _default_resolver.resolve(exc)
