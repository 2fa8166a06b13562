"""Compiled classifier: first-match-wins evaluation of ordered patterns."""

from __future__ import annotations

import re
from dataclasses import dataclass

from btcrpc_errors.core.config import MatchOptions
from btcrpc_errors.exceptions import NoMatch

from .results import TaggedResult


@dataclass(frozen=True)
class CompiledCase:
    """One (case, arity, pattern) entry in evaluation order."""

    case_name: str
    arity: int
    pattern: re.Pattern[str]


class CompiledClassifier:
    """Ordered (case, pattern) entries plus an optional catch-all case.

    Built by ``compile_specs()``; read-only afterwards and safe to share
    between threads. Entries are evaluated strictly in order and the first
    matching entry decides the case, even when a later entry would also
    match. The catch-all is never part of that order: it is consulted only
    once every entry has failed.
    """

    def __init__(
        self,
        name: str,
        entries: tuple[CompiledCase, ...],
        catch_all: str | None,
        options: MatchOptions,
    ) -> None:
        self.name = name
        self.entries = entries
        self.catch_all = catch_all
        self.options = options

    @property
    def case_names(self) -> tuple[str, ...]:
        """Case names in evaluation order, catch-all last."""
        names = list(dict.fromkeys(entry.case_name for entry in self.entries))
        if self.catch_all is not None:
            names.append(self.catch_all)
        return tuple(names)

    def _match(self, entry: CompiledCase, text: str) -> re.Match[str] | None:
        if self.options.anchored:
            return entry.pattern.fullmatch(text)
        return entry.pattern.search(text)

    def _captures(self, match: re.Match[str]) -> tuple[str, ...]:
        # Optional groups that did not participate yield "".
        fields = match.groups(default="")
        if self.options.strip_captures:
            return tuple(f.strip() for f in fields)
        return tuple(fields)

    def try_classify(self, text: str) -> TaggedResult | None:
        """Classify ``text``; None when nothing matches and there is no catch-all."""
        for entry in self.entries:
            match = self._match(entry, text)
            if match is not None:
                return TaggedResult(entry.case_name, self._captures(match))

        if self.catch_all is not None:
            return TaggedResult(self.catch_all, (text,), is_catch_all=True)
        return None

    def classify(self, text: str) -> TaggedResult:
        """Classify ``text``.

        Raises:
            NoMatch: If no pattern matches and there is no catch-all case.
        """
        result = self.try_classify(text)
        if result is None:
            raise NoMatch(self.name, text)
        return result

    def __repr__(self) -> str:
        return (
            f"CompiledClassifier(name={self.name!r}, cases={len(self.case_names)}, "
            f"patterns={len(self.entries)}, catch_all={self.catch_all!r})"
        )
