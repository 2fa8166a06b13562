"""Bitcoin Core JSON-RPC error codes.

Mirrors ``RPCErrorCode`` from Bitcoin Core's ``src/rpc/protocol.h``, with the
``RPC_`` prefix dropped from member names.

| Range | Group |
|-------|-------|
| -32768 .. -32000 | Standard JSON-RPC 2.0 errors |
| -1 .. -28, -32 | General application errors |
| -9, -10, -23, -24, -29 .. -31, -33, -34 | P2P client errors |
| -4, -6, -11 .. -19, -35, -36 | Wallet errors |
"""

from __future__ import annotations

from enum import IntEnum


class RpcErrorCode(IntEnum):
    """Coarse RPC error categories, keyed by their integer code."""

    # Standard JSON-RPC 2.0 errors
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    PARSE_ERROR = -32700

    # General application defined errors
    MISC_ERROR = -1
    FORBIDDEN_BY_SAFE_MODE = -2
    TYPE_ERROR = -3
    INVALID_ADDRESS_OR_KEY = -5
    OUT_OF_MEMORY = -7
    INVALID_PARAMETER = -8
    DATABASE_ERROR = -20
    DESERIALIZATION_ERROR = -22
    VERIFY_ERROR = -25
    VERIFY_REJECTED = -26
    VERIFY_ALREADY_IN_CHAIN = -27
    IN_WARMUP = -28
    METHOD_DEPRECATED = -32

    # P2P client errors
    CLIENT_NOT_CONNECTED = -9
    CLIENT_IN_INITIAL_DOWNLOAD = -10
    CLIENT_NODE_ALREADY_ADDED = -23
    CLIENT_NODE_NOT_ADDED = -24
    CLIENT_NODE_NOT_CONNECTED = -29
    CLIENT_INVALID_IP_OR_SUBNET = -30
    CLIENT_P2P_DISABLED = -31
    CLIENT_MEMPOOL_DISABLED = -33
    CLIENT_NODE_CAPACITY_REACHED = -34

    # Wallet errors
    WALLET_ERROR = -4
    WALLET_INSUFFICIENT_FUNDS = -6
    WALLET_INVALID_LABEL_NAME = -11
    WALLET_KEYPOOL_RAN_OUT = -12
    WALLET_UNLOCK_NEEDED = -13
    WALLET_PASSPHRASE_INCORRECT = -14
    WALLET_WRONG_ENC_STATE = -15
    WALLET_ENCRYPTION_FAILED = -16
    WALLET_ALREADY_UNLOCKED = -17
    WALLET_NOT_FOUND = -18
    WALLET_NOT_SPECIFIED = -19
    WALLET_ALREADY_LOADED = -35
    WALLET_ALREADY_EXISTS = -36

    @classmethod
    def lookup(cls, code: int) -> RpcErrorCode | None:
        """Return the member for ``code``, or None for codes Bitcoin Core does not define."""
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def rpc_name(self) -> str:
        """The name as spelled in Bitcoin Core (e.g., "RPC_VERIFY_ERROR")."""
        return f"RPC_{self.name}"

    @property
    def group(self) -> str:
        """One of "json_rpc", "p2p_client", "wallet" or "general"."""
        if self.value <= -32000:
            return "json_rpc"
        if self.name.startswith("CLIENT_"):
            return "p2p_client"
        if self.name.startswith("WALLET_"):
            return "wallet"
        return "general"
