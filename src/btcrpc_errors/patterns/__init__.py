"""Pattern classification engine.

Turns declarative case tables into classifiers that resolve a message to
exactly one named case, extracting its captured fields.

Usage:
    from btcrpc_errors.patterns import PatternSpec, compile_specs

    classifier = compile_specs([
        PatternSpec("Missing", 1, ("^Missing (.*)$",)),
        PatternSpec("Generic", 1),
    ])
    classifier.classify("Missing txid")   # TaggedResult("Missing", ("txid",))
"""

from .classifier import CompiledCase, CompiledClassifier
from .compiler import compile_specs
from .results import TaggedResult
from .spec import MAX_ARITY, PatternSpec
from .templates import (
    PLACEHOLDER,
    prefix_pattern,
    template_arity,
    template_spec,
    template_to_pattern,
)

__all__ = [
    "CompiledCase",
    "CompiledClassifier",
    "MAX_ARITY",
    "PLACEHOLDER",
    "PatternSpec",
    "TaggedResult",
    "compile_specs",
    "prefix_pattern",
    "template_arity",
    "template_spec",
    "template_to_pattern",
]
