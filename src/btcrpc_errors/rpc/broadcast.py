"""Classify rejections of ``sendrawtransaction``.

Only codes -25, -26 and -27 are broadcast rejections. Within a code the
sub-case is decided by the message prefix, tried in a fixed order, with a
generic case holding the whole message as the fallback. The rules are
ordinary pattern specs run by the same classifier as the case tables.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from btcrpc_errors.patterns import CompiledClassifier, PatternSpec, compile_specs, prefix_pattern

from .codes import RpcErrorCode
from .envelope import extract_envelope

SENDRAWTRANSACTION_PREFIX = "sendrawtransaction RPC error: "


class BroadcastRejection(str, Enum):
    """Why the node rejected a transaction we tried to broadcast."""

    VERIFY_REJECTED = "VerifyRejected"
    """Rejected by network rules (e.g. an invalid signature); detail is the message."""

    VERIFY_ERROR = "VerifyError"
    """General verification error; detail is the message."""

    ALREADY_IN_CHAIN = "AlreadyInChain"
    """The transaction is already confirmed."""

    PREMATURE_SPEND_OF_COINBASE = "PrematureSpendOfCoinbase"
    """An input spends a coinbase output that has not matured."""

    CONFLICTS_WITH_MEMPOOL = "ConflictsWithMempool"
    """Conflicts with a non-replaceable mempool transaction."""

    MISSING_OR_SPENT = "MissingOrSpent"
    """An input is missing or already spent."""

    SCRIPT_PUBKEY_NOT_SATISFIED = "ScriptPubkeyNotSatisfied"
    """A witness or scriptSig did not satisfy its script pubkey; detail is the reason."""


@dataclass(frozen=True)
class BroadcastTxError:
    kind: BroadcastRejection
    detail: str | None = None

    def __str__(self) -> str:
        if self.detail is None:
            return self.kind.value
        return f"{self.kind.value}({self.detail!r})"


# "non-mandatory-script-verify-flag (reason)" -> "reason". Leading " (" runs
# and trailing ")" runs are trimmed from the remainder.
_SCRIPT_VERIFY_PATTERN = (
    "(?s)^" + re.escape("non-mandatory-script-verify-flag") + r"(?: \()*(.*?)\)*$"
)

_BROADCAST_RULES: dict[RpcErrorCode, list[PatternSpec]] = {
    RpcErrorCode.VERIFY_ERROR: [
        PatternSpec(
            BroadcastRejection.MISSING_OR_SPENT.value, 0,
            (prefix_pattern("bad-txns-inputs-missingorspent"),),
        ),
        PatternSpec(BroadcastRejection.VERIFY_ERROR.value, 1),
    ],
    RpcErrorCode.VERIFY_REJECTED: [
        PatternSpec(
            BroadcastRejection.PREMATURE_SPEND_OF_COINBASE.value, 0,
            (prefix_pattern("bad-txns-premature-spend-of-coinbase"),),
        ),
        PatternSpec(
            BroadcastRejection.CONFLICTS_WITH_MEMPOOL.value, 0,
            (prefix_pattern("txn-mempool-conflict"),),
        ),
        PatternSpec(
            BroadcastRejection.SCRIPT_PUBKEY_NOT_SATISFIED.value, 1,
            (_SCRIPT_VERIFY_PATTERN,),
        ),
        PatternSpec(BroadcastRejection.VERIFY_REJECTED.value, 1),
    ],
    RpcErrorCode.VERIFY_ALREADY_IN_CHAIN: [
        PatternSpec(BroadcastRejection.ALREADY_IN_CHAIN.value, 0, ("(?s).*",)),
    ],
}

_CLASSIFIERS: dict[RpcErrorCode, CompiledClassifier] = {
    code: compile_specs(specs, name=f"broadcast:{code.rpc_name}")
    for code, specs in _BROADCAST_RULES.items()
}


def classify_broadcast_error(code: int, message: str) -> BroadcastTxError | None:
    """Classify a ``sendrawtransaction`` error; None for non-rejection codes."""
    category = RpcErrorCode.lookup(code)
    classifier = _CLASSIFIERS.get(category) if category is not None else None
    if classifier is None:
        return None

    # Every rule set ends in a catch-all or matches everything.
    result = classifier.classify(message)
    return BroadcastTxError(
        kind=BroadcastRejection(result.case),
        detail=result.fields[0] if result.fields else None,
    )


def parse_sendrawtransaction_error(text: str) -> BroadcastTxError | None:
    """Parse a client error string of the form ``sendrawtransaction RPC error: {...}``.

    Returns None when the text is not a ``sendrawtransaction`` error or the
    code is not a broadcast rejection.

    Raises:
        EnvelopeNotFound: If the text after the prefix is not exactly one
            RPC error object.
    """
    if not text.startswith(SENDRAWTRANSACTION_PREFIX):
        return None
    envelope = extract_envelope(text[len(SENDRAWTRANSACTION_PREFIX):], strict=True)
    return classify_broadcast_error(envelope.code, envelope.message)
