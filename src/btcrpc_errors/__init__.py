"""Classify Bitcoin Core JSON-RPC error messages into a typed taxonomy.

A response such as ``{"code": -25, "message": "Input not found or already
spent"}`` is decoded in two tiers: the code selects a category
(RpcErrorCode), and categories with a case table classify the free-text
message into a named case with its extracted fields.

Example::

    from btcrpc_errors import decode_rpc_error

    error = decode_rpc_error('RPC_VERIFY_ERROR occured: {"code": -25, '
                             '"message": "Input not found or already spent"}')
    error.category   # RpcErrorCode.VERIFY_ERROR
    error.case       # "MissingOrSpend"
"""

__version__ = "0.3.0"

from btcrpc_errors.exceptions import (
    CategoryDecodeError,
    DecodeError,
    EnvelopeNotFound,
    InvalidPattern,
    MultipleCatchAllCases,
    NoMatch,
    RpcErrorsError,
    SpecArityMismatch,
    SpecError,
    UnsupportedCaseShape,
)
from btcrpc_errors.patterns import (
    CompiledClassifier,
    PatternSpec,
    TaggedResult,
    compile_specs,
)
from btcrpc_errors.rpc import (
    BroadcastRejection,
    BroadcastTxError,
    RpcEnvelope,
    RpcError,
    RpcErrorCode,
    RpcErrorDecoder,
    classify_broadcast_error,
    decode_rpc_error,
    extract_envelope,
    parse_sendrawtransaction_error,
)

__all__ = [
    "__version__",
    "BroadcastRejection",
    "BroadcastTxError",
    "CategoryDecodeError",
    "CompiledClassifier",
    "DecodeError",
    "EnvelopeNotFound",
    "InvalidPattern",
    "MultipleCatchAllCases",
    "NoMatch",
    "PatternSpec",
    "RpcEnvelope",
    "RpcError",
    "RpcErrorCode",
    "RpcErrorDecoder",
    "RpcErrorsError",
    "SpecArityMismatch",
    "SpecError",
    "TaggedResult",
    "UnsupportedCaseShape",
    "classify_broadcast_error",
    "compile_specs",
    "decode_rpc_error",
    "extract_envelope",
    "parse_sendrawtransaction_error",
]
