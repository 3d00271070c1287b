# Common utilities
from ledgergate.common.crypto import CryptoUtils as CryptoUtils
from ledgergate.common.crypto import derive_signer as derive_signer
from ledgergate.common.logging_utils import setup_logger as setup_logger

__all__ = ["CryptoUtils", "derive_signer", "setup_logger"]
