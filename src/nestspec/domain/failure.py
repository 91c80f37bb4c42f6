"""Exception containment.

Every hook phase and every example body runs through :func:`run_guarded`.
A failure is caught, unwrapped one level if it came through a reflective
invocation, converted by the spec instance, and recorded into a
:class:`FailureSlot`. A slot keeps only the first failure; later failures at
the same scope still unwind their own call but are not reported.

Configuration errors are not failures of the spec under test. They pass
through :func:`run_guarded` untouched and end the run.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from nestspec.core.errors import SpecConfigurationError, unwrap_invocation
from nestspec.core.logging import get_logger

if TYPE_CHECKING:
    from nestspec.domain.spec import Spec

logger = get_logger(__name__)


class FailureSlot:
    """Settable-once cell holding the first failure recorded at one scope."""

    __slots__ = ("exception",)

    def __init__(self) -> None:
        self.exception: BaseException | None = None

    def record(self, exception: BaseException) -> bool:
        """Store ``exception`` unless the slot is already taken."""
        if self.exception is not None:
            return False
        self.exception = exception
        return True

    def clear(self) -> None:
        self.exception = None

    def __bool__(self) -> bool:
        return self.exception is not None

    def __repr__(self) -> str:
        return f"FailureSlot({self.exception!r})"


def run_guarded(
    action: Callable[[Spec], Any],
    instance: Spec,
    slot: FailureSlot,
    *,
    scope: str = "",
) -> None:
    """Run ``action(instance)``, containing any execution failure in ``slot``.

    Args:
        action: Phase runner or example body taking the spec instance
        instance: Spec instance for the subtree being run
        slot: Context or example failure slot
        scope: Label used in log events (context or example name)
    """
    try:
        action(instance)
    except SpecConfigurationError:
        raise
    except Exception as exc:
        failure = instance.exception_to_return(unwrap_invocation(exc))
        recorded = slot.record(failure)
        logger.debug(
            "hook_failed",
            scope=scope,
            action=getattr(action, "__name__", repr(action)),
            error_type=type(failure).__name__,
            recorded=recorded,
        )
