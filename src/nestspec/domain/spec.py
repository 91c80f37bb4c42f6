"""The spec instance shared by a subtree during a run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nestspec.domain.tags import TagsFilter

if TYPE_CHECKING:
    from nestspec.domain.context import Context


class Spec:
    """
    Base class for user spec classes.

    One instance is bound to a whole context tree by
    :meth:`Context.build`; every class-level hook and method example in that
    tree receives it, so hooks share state through its attributes.

    Attributes:
        tags_filter: Filter deciding which examples run (runs all when None)
        context: The context the instance was built onto
    """

    def __init__(self, tags_filter: TagsFilter | None = None) -> None:
        self.tags_filter = tags_filter
        self.context: Context | None = None

    def effective_filter(self) -> TagsFilter:
        if self.tags_filter is None:
            return TagsFilter()
        return self.tags_filter

    def exception_to_return(self, exception: BaseException) -> BaseException:
        """Convert a caught failure into the exception that gets reported.

        Subclasses override this to translate framework-specific errors.
        """
        return exception
