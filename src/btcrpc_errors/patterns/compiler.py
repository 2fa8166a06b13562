"""Compile pattern specs into a CompiledClassifier.

Validation happens here, once, before any message is classified:

- every case has positional fields and an arity between 0 and MAX_ARITY;
- every pattern of a case captures exactly ``arity`` groups;
- at most one case has no patterns (the catch-all), and it has arity 1.

Any violation raises a SpecError subclass and no classifier is produced.
Declaration order is preserved exactly; it decides which of several
overlapping cases wins.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from btcrpc_errors.core.config import MatchOptions
from btcrpc_errors.core.logging import get_logger
from btcrpc_errors.exceptions import (
    InvalidPattern,
    MultipleCatchAllCases,
    SpecArityMismatch,
    UnsupportedCaseShape,
)

from .classifier import CompiledCase, CompiledClassifier
from .spec import MAX_ARITY, PatternSpec

_logger = get_logger("compiler")


def _check_shape(spec: PatternSpec) -> None:
    if spec.field_names is not None:
        raise UnsupportedCaseShape(
            spec.case_name, "named fields cannot be filled from captures"
        )
    if not 0 <= spec.arity <= MAX_ARITY:
        raise UnsupportedCaseShape(
            spec.case_name, f"arity {spec.arity} outside 0..{MAX_ARITY}"
        )
    if spec.is_catch_all and spec.arity != 1:
        raise UnsupportedCaseShape(
            spec.case_name,
            f"case without patterns must have arity 1 (catch-all), not {spec.arity}",
        )


def _compile_pattern(case_name: str, pattern: str, flags: int) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidPattern(case_name, pattern, str(e)) from e


def _warn_on_shadowed_examples(
    classifier: CompiledClassifier,
    specs: list[PatternSpec],
) -> None:
    """Warn when an example of a case resolves to a different case.

    With first-match-wins this means an earlier, broader case swallows the
    example. The order is left as declared.
    """
    for spec in specs:
        for example in spec.examples:
            result = classifier.try_classify(example)
            if result is None:
                _logger.warning(
                    "case_example_unmatched",
                    classifier=classifier.name,
                    case=spec.case_name,
                    example=example,
                )
            elif result.case != spec.case_name:
                _logger.warning(
                    "case_shadowed",
                    classifier=classifier.name,
                    case=spec.case_name,
                    shadowed_by=result.case,
                    example=example,
                )


def compile_specs(
    specs: Iterable[PatternSpec],
    options: MatchOptions | None = None,
    name: str = "classifier",
) -> CompiledClassifier:
    """Validate ``specs`` and build a classifier.

    Args:
        specs: Cases in priority order.
        options: Matching options; defaults to anchored, case-sensitive.
        name: Name used in logs and NoMatch errors.

    Returns:
        The compiled classifier.

    Raises:
        UnsupportedCaseShape: Named fields, arity out of range, a repeated
            case name, or a patternless case that is not arity 1.
        SpecArityMismatch: A pattern's capture count differs from the arity.
        MultipleCatchAllCases: More than one patternless case.
        InvalidPattern: A pattern does not compile.
    """
    options = options or MatchOptions()
    specs = list(specs)
    flags = 0 if options.case_sensitive else re.IGNORECASE

    entries: list[CompiledCase] = []
    catch_all: str | None = None
    seen: set[str] = set()

    for spec in specs:
        _check_shape(spec)
        if spec.case_name in seen:
            raise UnsupportedCaseShape(spec.case_name, "case declared more than once")
        seen.add(spec.case_name)

        if spec.is_catch_all:
            if catch_all is not None:
                raise MultipleCatchAllCases(spec.case_name, catch_all)
            catch_all = spec.case_name
            continue

        compiled = [_compile_pattern(spec.case_name, p, flags) for p in spec.patterns]
        captures = [regex.groups for regex in compiled]
        if any(count != spec.arity for count in captures):
            raise SpecArityMismatch(spec.case_name, spec.arity, captures)

        entries.extend(CompiledCase(spec.case_name, spec.arity, regex) for regex in compiled)

    classifier = CompiledClassifier(
        name=name,
        entries=tuple(entries),
        catch_all=catch_all,
        options=options,
    )

    if options.warn_on_overlap:
        _warn_on_shadowed_examples(classifier, specs)

    _logger.debug(
        "classifier_compiled",
        classifier=name,
        cases=len(classifier.case_names),
        patterns=len(entries),
        catch_all=catch_all,
        anchored=options.anchored,
    )
    return classifier
