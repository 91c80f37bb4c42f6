"""Tags and tag filters.

A :class:`TagSet` is the set of labels attached to a context or example.
Labels are case-normalised and kept in first-seen order so reports read the
way the spec was declared. Children inherit their ancestors' tags when they
are attached to the tree (see :meth:`Context.add_context`).

A :class:`TagsFilter` decides which examples take part in a run::

    TagsFilter.parse("fast,~slow")   # include 'fast', exclude 'slow'

Pending examples are filtered as though they also carried the ``pending``
tag, so ``~pending`` leaves them out of a run entirely.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

PENDING_TAG = "pending"

_SEPARATORS = re.compile(r"[,\s]+")
_LOOSE_NEGATION = re.compile(r"~\s+")


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


class TagSet:
    """Ordered, de-duplicated collection of normalised tags."""

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[str] | None = None) -> None:
        self._tags: list[str] = []
        if tags is not None:
            self.add_all(tags)

    @classmethod
    def parse(cls, tags: str | Iterable[str] | None) -> TagSet:
        """Build a TagSet from ``"a, b c"``, an iterable of labels, or None."""
        if tags is None:
            return cls()
        if isinstance(tags, TagSet):
            return cls(tags)
        if isinstance(tags, str):
            return cls(_SEPARATORS.split(tags))
        return cls(tags)

    def add(self, tag: str) -> None:
        tag = normalize_tag(tag)
        if tag and tag not in self._tags:
            self._tags.append(tag)

    def add_all(self, tags: Iterable[str]) -> None:
        for tag in tags:
            self.add(tag)

    def union(self, other: Iterable[str]) -> TagSet:
        merged = TagSet(self._tags)
        merged.add_all(other)
        return merged

    def intersects(self, other: Iterable[str]) -> bool:
        return any(normalize_tag(tag) in self._tags for tag in other)

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and normalize_tag(tag) in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tags))

    def __len__(self) -> int:
        return len(self._tags)

    def __bool__(self) -> bool:
        return bool(self._tags)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagSet):
            return set(self._tags) == set(other._tags)
        if isinstance(other, (list, tuple, set, frozenset)):
            return set(self._tags) == {normalize_tag(t) for t in other}
        return NotImplemented

    def __repr__(self) -> str:
        return f"TagSet({self._tags!r})"


class TagsFilter:
    """
    Include/exclude predicate over an example's inherited tags.

    An example is skipped when any of its tags is excluded, or when the
    filter has include tags and the example carries none of them. An empty
    filter runs everything.

    Example::

        tags_filter = TagsFilter.parse("db,~slow")
        tags_filter.should_skip(TagSet.parse("db"))          # False
        tags_filter.should_skip(TagSet.parse("db slow"))     # True
        tags_filter.should_skip(TagSet.parse("ui"))          # True
    """

    def __init__(
        self,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> None:
        self.include = TagSet(include)
        self.exclude = TagSet(exclude)

    @classmethod
    def parse(cls, expression: str | None) -> TagsFilter:
        """Parse ``"a,~b"``. A ``~`` applies to the next tag even across spaces."""
        if expression:
            expression = _LOOSE_NEGATION.sub("~", expression)
        include: list[str] = []
        exclude: list[str] = []
        for token in TagSet.parse(expression):
            if token.startswith("~"):
                if token[1:]:
                    exclude.append(token[1:])
            else:
                include.append(token)
        return cls(include, exclude)

    def should_skip(self, tags: Iterable[str], pending: bool = False) -> bool:
        effective = TagSet(tags)
        if pending:
            effective.add(PENDING_TAG)
        if effective.intersects(self.exclude):
            return True
        return bool(self.include) and not effective.intersects(self.include)

    def should_run(self, tags: Iterable[str], pending: bool = False) -> bool:
        return not self.should_skip(tags, pending)

    def __bool__(self) -> bool:
        return bool(self.include) or bool(self.exclude)

    def __repr__(self) -> str:
        return f"TagsFilter(include={list(self.include)!r}, exclude={list(self.exclude)!r})"
