from .tokens import TokenRecord, TokenMetadata, TokenPrice
from .portfolio import Position, PortfolioSnapshot
from .requests import PortfolioRequest
from .responses import ErrorDetail, ErrorResponse

__all__ = [
    "TokenRecord",
    "TokenMetadata",
    "TokenPrice",
    "Position",
    "PortfolioSnapshot",
    "PortfolioRequest",
    "ErrorDetail",
    "ErrorResponse",
]
