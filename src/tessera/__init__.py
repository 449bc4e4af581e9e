__all__ = [
    # Models
    "BalanceRequest",
    "SmartContractCallRequest",
    "TokenInfo",
    "TokenInfoRequest",
    "TransactionLookupRequest",
    "TransferRequest",
    # Config
    "TesseraConfig",
    # Accounts
    "Account",
    "address_of",
    "from_encrypted_keystore",
    "from_mnemonic",
    "from_private_key",
    "generate",
    "to_encrypted_keystore",
    # Chain
    "ChainContext",
    "ContractBinding",
    "ContractOnly",
    "NoContext",
    "RpcTransport",
    "open_transport",
    "SignerAndContract",
    "SignerOnly",
    "get_balance",
    "get_token_info",
    "get_transaction",
    "resolve_context",
    "rpc_request",
    "smart_contract_send",
    "transfer",
    # Errors
    "AccountError",
    "BroadcastError",
    "ConnectivityError",
    "DecryptionError",
    "EncodingError",
    "EstimationError",
    "InvalidInputError",
    "InvalidKeyError",
    "InvalidMnemonicError",
    "NonceFetchError",
    "NotFoundError",
    "PipelineError",
    "RpcError",
    "SigningError",
    "TesseraError",
    "TransactionSubmissionError",
]

__version__ = "0.3.0"

from .config import TesseraConfig
from .errors import (
    AccountError,
    BroadcastError,
    ConnectivityError,
    DecryptionError,
    EncodingError,
    EstimationError,
    InvalidInputError,
    InvalidKeyError,
    InvalidMnemonicError,
    NonceFetchError,
    NotFoundError,
    PipelineError,
    RpcError,
    SigningError,
    TesseraError,
    TransactionSubmissionError,
)
from .models import (
    BalanceRequest,
    SmartContractCallRequest,
    TokenInfo,
    TokenInfoRequest,
    TransactionLookupRequest,
    TransferRequest,
)
from .keys.accounts import (
    Account,
    address_of,
    from_encrypted_keystore,
    from_mnemonic,
    from_private_key,
    generate,
    to_encrypted_keystore,
)
from .chain.context import (
    ChainContext,
    ContractOnly,
    NoContext,
    SignerAndContract,
    SignerOnly,
    resolve_context,
)
from .chain.contract import ContractBinding
from .chain.queries import get_balance, get_token_info, get_transaction
from .chain.rpc import RpcTransport, open_transport, rpc_request
from .chain.transfer import transfer
from .chain.tx import smart_contract_send
