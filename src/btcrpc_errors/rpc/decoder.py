"""Two-tier RPC error decoding.

The integer code selects a coarse category (RpcErrorCode); categories that
own a case table then classify the message into a TaggedResult.

    raw text -> extract_envelope() -> (code, message)
             -> RpcErrorDecoder.dispatch() -> RpcError
"""

from __future__ import annotations

from functools import cache

from btcrpc_errors.core.config import CaseTableSet
from btcrpc_errors.core.logging import get_logger
from btcrpc_errors.exceptions import CategoryDecodeError, NoMatch
from btcrpc_errors.patterns import CompiledClassifier

from .codes import RpcErrorCode
from .envelope import extract_envelope
from .models import RpcError
from .tables import build_classifiers, load_case_tables

_logger = get_logger("decoder")


class RpcErrorDecoder:
    """Decodes RPC error responses into RpcError values.

    All case tables are compiled in the constructor, so an invalid table
    fails here rather than on the first matching response. After
    construction the decoder holds no mutable state and may be shared.
    """

    def __init__(self, tables: CaseTableSet | None = None) -> None:
        """Compile the classifiers.

        Args:
            tables: Case tables to use; the packaged tables when None.

        Raises:
            SpecError: If a table fails validation.
            ValueError: If a table names a code that is not an RPC error code.
        """
        if tables is None:
            tables = load_case_tables()
        self._classifiers = build_classifiers(tables)

    @property
    def classifiers(self) -> dict[RpcErrorCode, CompiledClassifier]:
        return dict(self._classifiers)

    def classifier_for(self, category: RpcErrorCode) -> CompiledClassifier | None:
        return self._classifiers.get(category)

    def dispatch(self, code: int, message: str) -> RpcError:
        """Resolve ``(code, message)`` to an RpcError.

        Unknown codes never fail: they come back with ``category=None`` and
        the pair unchanged.

        Raises:
            CategoryDecodeError: If the code's case table has no catch-all and
                none of its cases matches the message.
        """
        category = RpcErrorCode.lookup(code)
        if category is None:
            _logger.info("unknown_rpc_code", code=code)
            return RpcError(code=code, message=message)

        classifier = self._classifiers.get(category)
        if classifier is None:
            return RpcError(code=code, message=message, category=category)

        try:
            detail = classifier.classify(message)
        except NoMatch as e:
            raise CategoryDecodeError(code, message, category.rpc_name, e) from e

        _logger.debug(
            "rpc_error_decoded",
            code=code,
            category=category.rpc_name,
            case=detail.case,
            catch_all=detail.is_catch_all,
        )
        return RpcError(code=code, message=message, category=category, detail=detail)

    def decode(self, raw_text: str, strict: bool = False) -> RpcError:
        """Extract the envelope from ``raw_text`` and dispatch it.

        Raises:
            EnvelopeNotFound: If the text holds no RPC error object.
            CategoryDecodeError: See ``dispatch()``.
        """
        envelope = extract_envelope(raw_text, strict=strict)
        return self.dispatch(envelope.code, envelope.message)


@cache
def default_decoder() -> RpcErrorDecoder:
    """Process-wide decoder over the packaged tables, built on first use."""
    return RpcErrorDecoder()


def decode_rpc_error(raw_text: str, strict: bool = False) -> RpcError:
    """Decode ``raw_text`` with the default decoder."""
    return default_decoder().decode(raw_text, strict=strict)
