"""Tagged classification results."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TaggedResult:
    """The case a message resolved to, with its captured fields in order.

    Results compare by case and fields only, so a catch-all result equals
    ``TaggedResult("Generic", (text,))`` built by hand.
    """

    case: str
    fields: tuple[str, ...] = ()
    is_catch_all: bool = field(default=False, compare=False)

    @property
    def arity(self) -> int:
        return len(self.fields)

    def __getitem__(self, index: int) -> str:
        return self.fields[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __str__(self) -> str:
        if not self.fields:
            return self.case
        args = ", ".join(repr(f) for f in self.fields)
        return f"{self.case}({args})"
