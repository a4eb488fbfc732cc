from functools import lru_cache

from backend.config import get_settings
from .wallet_integration import YayaWalletGateway


@lru_cache()
def get_wallet_gateway() -> YayaWalletGateway:
    return YayaWalletGateway(get_settings())
