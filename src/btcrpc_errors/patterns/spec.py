"""Pattern specs: the declarative input of the compiler."""

from __future__ import annotations

from dataclasses import dataclass, field

# Largest number of captured fields a case may declare.
MAX_ARITY = 4


@dataclass(frozen=True)
class PatternSpec:
    """One named case with its arity and ordered patterns.

    A spec without patterns is a catch-all candidate and must have arity 1.
    ``field_names`` marks a case with named fields, which the compiler
    rejects. ``examples`` are sample messages used only for the compiler's
    overlap warning.
    """

    case_name: str
    arity: int
    patterns: tuple[str, ...] = ()
    field_names: tuple[str, ...] | None = None
    examples: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        for attr in ("patterns", "examples"):
            if isinstance(getattr(self, attr), str):
                raise TypeError(
                    f"case {self.case_name!r}: {attr} must be a sequence of strings, "
                    "not a single string"
                )
        # Accept lists from callers; store tuples so the spec stays immutable.
        object.__setattr__(self, "patterns", tuple(self.patterns))
        object.__setattr__(self, "examples", tuple(self.examples))
        if self.field_names is not None:
            object.__setattr__(self, "field_names", tuple(self.field_names))

    @property
    def is_catch_all(self) -> bool:
        return not self.patterns
