"""
Wallet Integration Module

Signed access to the YaYa Wallet transaction API with response normalization.
"""

from .gateway import YayaWalletGateway, WalletGatewayError
from .signing import RequestSigner, generate_signature
from .normalization import normalize_transactions

__all__ = [
    'YayaWalletGateway',
    'WalletGatewayError',
    'RequestSigner',
    'generate_signature',
    'normalize_transactions',
]
