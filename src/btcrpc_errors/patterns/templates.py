"""Placeholder templates and prefix rules compiled to regex patterns.

Bitcoin Core builds many error messages as a literal prefix, one
interpolated value and a literal suffix, e.g. ``"Missing amount for %s"``.
Writing those as ``"Missing amount for {}"`` is easier to review than the
equivalent escaped regex. Templates are only a notation: they become
ordinary patterns and go through the same compiler and runtime.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .spec import PatternSpec

PLACEHOLDER = "{}"


def template_arity(template: str) -> int:
    """Number of captured fields a template yields (0 or 1)."""
    return 1 if PLACEHOLDER in template else 0


def template_to_pattern(template: str) -> str:
    """Convert a ``{}`` template into an anchored regular expression.

    Only the first ``{}`` is a placeholder; any later one is literal text.
    A template without a placeholder matches its text exactly. The gap may
    span newlines, so ``"Wrong type passed:\\n{}"`` captures a multi-line
    value.
    """
    prefix, sep, suffix = template.partition(PLACEHOLDER)
    if not sep:
        return f"^{re.escape(template)}$"
    return f"(?s)^{re.escape(prefix)}(.*){re.escape(suffix)}$"


def prefix_pattern(prefix: str, capture: bool = False) -> str:
    """Pattern matching any message that starts with ``prefix``.

    With ``capture`` the remainder of the message is the one captured field.
    """
    rest = "(.*)" if capture else ".*"
    return f"(?s)^{re.escape(prefix)}{rest}$"


def template_spec(
    case_name: str,
    templates: Iterable[str],
    examples: Iterable[str] = (),
) -> PatternSpec:
    """Build a PatternSpec from templates.

    The arity is taken from the first template. Templates that disagree are
    left for the compiler to reject with SpecArityMismatch.
    """
    templates = list(templates)
    arity = template_arity(templates[0]) if templates else 1
    return PatternSpec(
        case_name=case_name,
        arity=arity,
        patterns=tuple(template_to_pattern(t) for t in templates),
        examples=tuple(examples),
    )
