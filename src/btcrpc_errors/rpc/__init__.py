"""Bitcoin Core RPC error decoding.

Re-exports the public symbols of the rpc subpackage.
"""

from btcrpc_errors.rpc.broadcast import (
    SENDRAWTRANSACTION_PREFIX,
    BroadcastRejection,
    BroadcastTxError,
    classify_broadcast_error,
    parse_sendrawtransaction_error,
)
from btcrpc_errors.rpc.codes import RpcErrorCode
from btcrpc_errors.rpc.decoder import RpcErrorDecoder, decode_rpc_error, default_decoder
from btcrpc_errors.rpc.envelope import extract_envelope
from btcrpc_errors.rpc.models import RpcEnvelope, RpcError
from btcrpc_errors.rpc.tables import (
    build_classifier,
    build_classifiers,
    case_to_spec,
    load_case_tables,
)

__all__ = [
    "SENDRAWTRANSACTION_PREFIX",
    "BroadcastRejection",
    "BroadcastTxError",
    "RpcEnvelope",
    "RpcError",
    "RpcErrorCode",
    "RpcErrorDecoder",
    "build_classifier",
    "build_classifiers",
    "case_to_spec",
    "classify_broadcast_error",
    "decode_rpc_error",
    "default_decoder",
    "extract_envelope",
    "load_case_tables",
    "parse_sendrawtransaction_error",
]
