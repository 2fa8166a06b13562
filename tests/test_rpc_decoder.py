"""Tests for the two-tier RPC error decoder (btcrpc_errors.rpc.decoder)."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from btcrpc_errors.core.config import CaseTableSet
from btcrpc_errors.exceptions import (
    CategoryDecodeError,
    EnvelopeNotFound,
    NoMatch,
    SpecArityMismatch,
)
from btcrpc_errors.patterns import TaggedResult
from btcrpc_errors.rpc import (
    RpcError,
    RpcErrorCode,
    RpcErrorDecoder,
    decode_rpc_error,
    default_decoder,
    load_case_tables,
)


@pytest.fixture
def decoder() -> RpcErrorDecoder:
    return RpcErrorDecoder()


class TestDecodeScenarios:
    """End-to-end decoding of real client error strings."""

    def test_verify_error_missing_or_spend(self, decoder: RpcErrorDecoder) -> None:
        text = 'RPC_VERIFY_ERROR occured: {"code": -25, "message": "Input not found or already spent"}'
        error = decoder.decode(text)
        assert error.category is RpcErrorCode.VERIFY_ERROR
        assert error.detail == TaggedResult("MissingOrSpend")
        assert error.detail.fields == ()

    def test_already_in_chain_has_no_detail(self, decoder: RpcErrorDecoder) -> None:
        text = 'sendrawtransaction RPC error: {"code":-27,"message":"Transaction already in block chain"}'
        error = decoder.decode(text)
        assert error == RpcError(
            code=-27,
            message="Transaction already in block chain",
            category=RpcErrorCode.VERIFY_ALREADY_IN_CHAIN,
        )
        assert error.detail is None
        assert error.case is None

    def test_strict_decode(self, decoder: RpcErrorDecoder) -> None:
        error = decoder.decode('{"code": -5, "message": "Block not found"}', strict=True)
        assert error.case == "BlockNotFound"

    def test_strict_decode_rejects_prose(self, decoder: RpcErrorDecoder) -> None:
        with pytest.raises(EnvelopeNotFound):
            decoder.decode('error: {"code": -5, "message": "Block not found"}', strict=True)

    def test_no_envelope(self, decoder: RpcErrorDecoder) -> None:
        with pytest.raises(EnvelopeNotFound):
            decoder.decode("Could not connect to the server 127.0.0.1:8332")

    def test_module_level_helper(self) -> None:
        error = decode_rpc_error('{"code": -3, "message": "Missing txid"}')
        assert error.detail == TaggedResult("Missing", ("txid",))


class TestDispatch:
    """Code to category mapping."""

    def test_unknown_code(self, decoder: RpcErrorDecoder) -> None:
        error = decoder.dispatch(-99999, "something odd")
        assert error.is_unknown
        assert error.category is None
        assert (error.code, error.message) == (-99999, "something odd")
        assert error.detail is None

    def test_unknown_code_logged(self, decoder: RpcErrorDecoder) -> None:
        with capture_logs() as logs:
            decoder.dispatch(12345, "x")
        assert {"event": "unknown_rpc_code", "code": 12345}.items() <= logs[0].items()

    @pytest.mark.parametrize(
        "code",
        [RpcErrorCode.MISC_ERROR, RpcErrorCode.IN_WARMUP, RpcErrorCode.WALLET_UNLOCK_NEEDED,
         RpcErrorCode.METHOD_NOT_FOUND],
    )
    def test_category_without_table(self, decoder: RpcErrorDecoder, code: RpcErrorCode) -> None:
        error = decoder.dispatch(int(code), "whatever")
        assert error.category is code
        assert error.detail is None
        assert not error.is_unknown

    def test_catch_all_detail(self, decoder: RpcErrorDecoder) -> None:
        error = decoder.dispatch(-25, "bad-txns-inputs-missingorspent")
        assert error.detail == TaggedResult("Generic", ("bad-txns-inputs-missingorspent",))
        assert error.detail.is_catch_all

    def test_classifier_for(self, decoder: RpcErrorDecoder) -> None:
        assert decoder.classifier_for(RpcErrorCode.TYPE_ERROR) is not None
        assert decoder.classifier_for(RpcErrorCode.MISC_ERROR) is None

    def test_default_decoder_is_shared(self) -> None:
        assert default_decoder() is default_decoder()

    def test_str(self, decoder: RpcErrorDecoder) -> None:
        assert str(decoder.dispatch(-3, "Missing txid")) == "RPC_TYPE_ERROR(Missing('txid'))"
        assert str(decoder.dispatch(7, "odd")) == "UNKNOWN [7]: odd"


class TestCategoryDecodeFailure:
    """A known code whose message fits none of its cases."""

    def test_no_match_propagates_as_category_error(self, tables_yaml: Path) -> None:
        decoder = RpcErrorDecoder(load_case_tables(tables_yaml))
        with pytest.raises(CategoryDecodeError) as exc_info:
            decoder.dispatch(-25, "bad-txns-inputs-missingorspent")
        err = exc_info.value
        assert err.code == -25
        assert err.message == "bad-txns-inputs-missingorspent"
        assert err.category == "RPC_VERIFY_ERROR"
        assert isinstance(err.cause, NoMatch)
        assert isinstance(err.__cause__, NoMatch)

    def test_not_downgraded_to_unknown(self, tables_yaml: Path) -> None:
        decoder = RpcErrorDecoder(load_case_tables(tables_yaml))
        with pytest.raises(CategoryDecodeError):
            decoder.decode('{"code": -25, "message": "no such case"}')

    def test_custom_table_classifies(self, tables_yaml: Path) -> None:
        decoder = RpcErrorDecoder(load_case_tables(tables_yaml))
        error = decoder.dispatch(-25, "TestBlockValidity failed: bad-cb-amount")
        assert error.detail == TaggedResult("BlockValidityFailed", ("bad-cb-amount",))

    def test_custom_permissive_table(self, tables_yaml: Path) -> None:
        decoder = RpcErrorDecoder(load_case_tables(tables_yaml))
        # Templates compile to anchored patterns, so permissive search still
        # needs the prefix at the start of the message.
        assert decoder.dispatch(-3, "Missing txid").detail == TaggedResult("Missing", ("txid",))
        assert decoder.dispatch(-3, "x Missing txid").detail == TaggedResult(
            "Generic", ("x Missing txid",)
        )


class TestDecoderConstruction:
    """Tables are compiled up front."""

    def test_bad_table_fails_at_construction(self) -> None:
        tables = CaseTableSet.from_yaml_string(
            """\
tables:
  TYPE_ERROR:
    code: -3
    cases:
      - name: Broken
        arity: 2
        patterns: ["^(x)$"]
"""
        )
        with pytest.raises(SpecArityMismatch):
            RpcErrorDecoder(tables)

    def test_unknown_table_code_rejected(self) -> None:
        tables = CaseTableSet.from_yaml_string(
            """\
tables:
  NOT_A_CODE:
    code: 777
    cases:
      - name: Generic
        arity: 1
"""
        )
        with pytest.raises(ValueError, match="777"):
            RpcErrorDecoder(tables)

    def test_classifiers_copy(self, decoder: RpcErrorDecoder) -> None:
        classifiers = decoder.classifiers
        classifiers.clear()
        assert decoder.classifiers


WRONG_PASSED_DETAIL = '{\n    "Position 1 (txid)": "JSON value of type number is not of expected type string"\n}'

PACKAGED_CASES = [
    # TYPE_ERROR
    (-3, "Address does not refer to key", TaggedResult("AddressNoKey")),
    (-3, "Address does not refer to a key", TaggedResult("AddressNoKey")),
    (-3, "Malformed base64 encoding", TaggedResult("MalformedBase64")),
    (-3, "Missing data String key for proposal", TaggedResult("MissingKeyForProposal")),
    (-3, "Missing required timestamp field for key", TaggedResult("MissingTimestamp")),
    (
        -3,
        "Missing amount for bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq",
        TaggedResult("MissingAmountForCoins", ("bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq",)),
    ),
    (-3, "Missing txid", TaggedResult("Missing", ("txid",))),
    (
        -3,
        "JSON value of type null is not of expected type string",
        TaggedResult("WrongJsonType", ("JSON value of type null is not of expected type string",)),
    ),
    (-3, "Unexpected key fee_rate", TaggedResult("UnexpectedKey", ("fee_rate",))),
    (-3, "Amount is not a number or string", TaggedResult("AmountNotNumberOrString")),
    (-3, "Invalid amount", TaggedResult("AmountInvalid")),
    (-3, "Amount out of range", TaggedResult("AmountOutOfRange")),
    (
        -3,
        "Wrong type passed:\n" + WRONG_PASSED_DETAIL,
        TaggedResult("WrongPassed", (WRONG_PASSED_DETAIL,)),
    ),
    (
        -3,
        'Expected number or "now" timestamp value for key. got type string',
        TaggedResult("WrongTimestamp", ("string",)),
    ),
    (-3, "Params must be an array", TaggedResult("Generic", ("Params must be an array",))),
    # INVALID_ADDRESS_OR_KEY
    (-5, "Block not found", TaggedResult("BlockNotFound")),
    (
        -5,
        "No such mempool or blockchain transaction. Use gettransaction for wallet transactions.",
        TaggedResult("TransactionNotFound"),
    ),
    (-5, "No such mempool transaction", TaggedResult("TransactionNotFound")),
    (-5, "Invalid Bitcoin address: xyz", TaggedResult("InvalidAddress", ("xyz",))),
    (-5, "Invalid private key encoding", TaggedResult("InvalidPrivateKey")),
    (-5, "Private key not available", TaggedResult("Generic", ("Private key not available",))),
    # INVALID_PARAMETER
    (-8, "Block height out of range", TaggedResult("BlockHeightOutOfRange")),
    (
        -8,
        "txid must be of length 64 (not 4, for 'abcd')",
        TaggedResult("HexWrongLength", ("txid", "64", "4", "abcd")),
    ),
    (
        -8,
        "blockhash must be hexadecimal string (not 'xyz')",
        TaggedResult("NotHex", ("blockhash", "xyz")),
    ),
    (
        -8,
        "Invalid parameter, duplicated address: bc1qxyz",
        TaggedResult("InvalidParameter", ("duplicated address: bc1qxyz",)),
    ),
    (-8, "Target block hash not found", TaggedResult("Generic", ("Target block hash not found",))),
    # VERIFY_ERROR
    (
        -25,
        "TestBlockValidity failed: bad-cb-amount",
        TaggedResult("BlockValidityFailed", ("bad-cb-amount",)),
    ),
    (
        -25,
        "Must submit previous header (0000abcd) first",
        TaggedResult("PreviousHeaderMissing", ("0000abcd",)),
    ),
    (-25, "Input not found or already spent", TaggedResult("MissingOrSpend")),
    (-25, "bad-txns-inputs-missingorspent", TaggedResult("Generic", ("bad-txns-inputs-missingorspent",))),
]


class TestPackagedTables:
    """The shipped cases.yaml, through the default tables."""

    @pytest.mark.parametrize(("code", "message", "expected"), PACKAGED_CASES)
    def test_case(
        self, decoder: RpcErrorDecoder, code: int, message: str, expected: TaggedResult
    ) -> None:
        assert decoder.dispatch(code, message).detail == expected

    def test_every_case_covered(self, decoder: RpcErrorDecoder) -> None:
        shipped = {
            (int(category), name)
            for category, classifier in decoder.classifiers.items()
            for name in classifier.case_names
        }
        covered = {(code, expected.case) for code, _, expected in PACKAGED_CASES}
        assert shipped == covered

    def test_specific_missing_cases_precede_generic(self, decoder: RpcErrorDecoder) -> None:
        names = decoder.classifier_for(RpcErrorCode.TYPE_ERROR).case_names
        generic = names.index("Missing")
        for specific in ("MissingKeyForProposal", "MissingTimestamp", "MissingAmountForCoins"):
            assert names.index(specific) < generic

    def test_compiles_without_warnings(self) -> None:
        with capture_logs() as logs:
            RpcErrorDecoder()
        assert [log for log in logs if log["log_level"] == "warning"] == []
        assert len([log for log in logs if log["event"] == "classifier_compiled"]) == 4

    def test_catch_all_last_in_every_table(self, decoder: RpcErrorDecoder) -> None:
        for classifier in decoder.classifiers.values():
            assert classifier.catch_all == "Generic"
            assert classifier.case_names[-1] == "Generic"


class TestMalformedResponses:
    def test_hostile_body_is_decode_error(self, decoder: RpcErrorDecoder) -> None:
        text = '{"code": -25, "message": "x", "data": ' + "[" * 200000 + "]" * 200000 + "}"
        with pytest.raises(EnvelopeNotFound):
            decoder.decode(text)
