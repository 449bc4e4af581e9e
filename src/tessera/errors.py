"""
Error taxonomy for Tessera.

Every failure raised by the core derives from ``TesseraError``.  Wrapping
always chains the original exception and keeps its message, so the text a
node returned (e.g. "insufficient funds for gas * price + value") reaches
the caller unchanged.

``exit_code`` is used by the CLI when an error ends a command.
"""

from __future__ import annotations

from typing import Any, Optional


class TesseraError(RuntimeError):
    exit_code: int = 1


class ConnectivityError(TesseraError):
    """The RPC endpoint is unreachable, malformed, or did not speak JSON."""

    exit_code = 3


class RpcError(TesseraError):
    """The node answered with a JSON-RPC error envelope."""

    exit_code = 4

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.data = data


class NotFoundError(TesseraError):
    """No contract binding could be resolved for an address."""

    exit_code = 5


class EncodingError(TesseraError, ValueError):
    """Call data could not be encoded against the ABI."""

    exit_code = 6


class InvalidInputError(TesseraError, ValueError):
    """A caller-supplied address, amount or gas price is malformed."""

    exit_code = 2


# ---------------------------------------------------------------------------
# Account resolution
# ---------------------------------------------------------------------------


class AccountError(TesseraError, ValueError):
    exit_code = 2


class InvalidKeyError(AccountError):
    pass


class InvalidMnemonicError(AccountError):
    pass


class DecryptionError(AccountError):
    pass


# ---------------------------------------------------------------------------
# Transaction paths
# ---------------------------------------------------------------------------


class TransactionSubmissionError(TesseraError):
    """A transfer could not be estimated or was rejected on submission."""

    exit_code = 7


class PipelineError(TesseraError):
    """A step of the raw contract-call pipeline failed."""

    exit_code = 8
    step: str = "pipeline"


class EstimationError(PipelineError):
    step = "estimate"


class NonceFetchError(PipelineError):
    step = "nonce"


class SigningError(PipelineError):
    step = "sign"


class BroadcastError(PipelineError):
    step = "broadcast"
