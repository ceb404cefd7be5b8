"""
Signer capability and order signing
"""

from .order_signer import recover_order_signer, sign_order
from .signer import AccountSigner, PrivateKeySigner, Signer, personal_message_digest

__all__ = [
    "AccountSigner",
    "PrivateKeySigner",
    "Signer",
    "personal_message_digest",
    "recover_order_signer",
    "sign_order",
]
