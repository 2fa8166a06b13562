"""Exception hierarchy for btcrpc_errors.

All library exceptions inherit from RpcErrorsError, enabling callers to
catch broad (RpcErrorsError) or narrow (e.g., NoMatch). Spec errors are
raised while building a classifier and mean the classifier is unusable;
NoMatch and DecodeError are raised per call.
"""

from __future__ import annotations


class RpcErrorsError(Exception):
    """Base exception for all btcrpc_errors errors."""


# =============================================================================
# Spec validation (raised by the compiler, never at classification time)
# =============================================================================


class SpecError(RpcErrorsError):
    """A case table is internally inconsistent and cannot be compiled."""

    def __init__(self, case_name: str, reason: str) -> None:
        self.case_name = case_name
        self.reason = reason
        super().__init__(f"case {case_name!r}: {reason}")


class SpecArityMismatch(SpecError):
    """A pattern's capture count disagrees with the case arity or its siblings."""

    def __init__(
        self,
        case_name: str,
        declared: int,
        captures: list[int],
    ) -> None:
        self.declared = declared
        self.captures = captures
        super().__init__(
            case_name,
            f"declared arity {declared} but patterns capture {captures}",
        )


class UnsupportedCaseShape(SpecError):
    """The case cannot be classified (named fields, bad arity, patternless non-catch-all)."""


class MultipleCatchAllCases(SpecError):
    """More than one patternless arity-1 case was declared."""

    def __init__(self, case_name: str, previous: str) -> None:
        self.previous = previous
        super().__init__(
            case_name,
            f"second catch-all case (already have {previous!r})",
        )


class InvalidPattern(SpecError):
    """A pattern is not a valid regular expression."""

    def __init__(self, case_name: str, pattern: str, error: str) -> None:
        self.pattern = pattern
        super().__init__(case_name, f"invalid pattern {pattern!r}: {error}")


# =============================================================================
# Runtime
# =============================================================================


class NoMatch(RpcErrorsError):
    """No pattern matched and the classifier has no catch-all case."""

    def __init__(self, classifier: str, text: str) -> None:
        self.classifier = classifier
        self.text = text
        super().__init__(f"{classifier}: no case matches {text!r}")


class DecodeError(RpcErrorsError):
    """Base for failures while decoding a raw RPC error response."""


class EnvelopeNotFound(DecodeError):
    """No well-formed {"code": ..., "message": ...} object in the response text."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"no RPC error envelope found: {reason}")


class CategoryDecodeError(DecodeError):
    """The code is known but its message matches none of the category's cases.

    Distinct from an unknown code: the category is known, the message shape
    is not.
    """

    def __init__(self, code: int, message: str, category: str, cause: NoMatch) -> None:
        self.code = code
        self.message = message
        self.category = category
        self.cause = cause
        super().__init__(
            f"RPC error {code} ({category}): unrecognised message {message!r}"
        )
