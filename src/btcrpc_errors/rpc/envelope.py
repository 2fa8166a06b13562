"""Extract the RPC error envelope from a raw response body.

Clients rarely hand over the bare JSON object. Typical inputs are::

    RPC_VERIFY_ERROR occured: {"code": -25, "message": "Input not found or already spent"}
    sendrawtransaction RPC error: {"code":-27,"message":"Transaction already in block chain"}
    {"code":-26,"message":"txn-mempool-conflict"} (while broadcasting)

In permissive mode the object starts at the first ``{`` and anything after
its closing ``}`` is ignored. In strict mode the whole text, apart from
surrounding whitespace, must be the object.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from btcrpc_errors.exceptions import EnvelopeNotFound

from .models import RpcEnvelope

_decoder = json.JSONDecoder()


def _decode_object(text: str, start: int) -> tuple[Any, int]:
    try:
        return _decoder.raw_decode(text, start)
    except json.JSONDecodeError as e:
        raise EnvelopeNotFound(text, f"malformed JSON at offset {e.pos}: {e.msg}") from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and pathologically nested values.
        raise EnvelopeNotFound(text, f"undecodable JSON: {e}") from e


def _envelope_from_object(obj: Any, text: str) -> RpcEnvelope:
    if not isinstance(obj, dict):
        raise EnvelopeNotFound(text, f"expected a JSON object, got {type(obj).__name__}")

    # Full JSON-RPC reply: {"result": null, "error": {...}, "id": ...}
    if "code" not in obj and isinstance(obj.get("error"), dict):
        obj = obj["error"]

    try:
        return RpcEnvelope.model_validate(obj)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise EnvelopeNotFound(text, f"invalid or missing fields: {fields}") from e


def extract_envelope(raw_text: str, strict: bool = False) -> RpcEnvelope:
    """Extract ``(code, message)`` from a response body.

    Args:
        raw_text: The complete response text.
        strict: Require the text to be exactly one JSON object.

    Returns:
        The extracted envelope. String escapes (quotes, newlines, unicode)
        in the message are decoded.

    Raises:
        EnvelopeNotFound: If no complete, well-typed envelope is present.
    """
    if strict:
        text = raw_text.strip()
        if not text.startswith("{"):
            raise EnvelopeNotFound(raw_text, "response is not a JSON object")
        obj, end = _decode_object(text, 0)
        if end != len(text):
            raise EnvelopeNotFound(raw_text, "trailing characters after JSON object")
        return _envelope_from_object(obj, raw_text)

    start = raw_text.find("{")
    if start == -1:
        raise EnvelopeNotFound(raw_text, "no '{' in response")
    obj, _ = _decode_object(raw_text, start)
    return _envelope_from_object(obj, raw_text)
