"""Terminal errors raised by the portfolio pipeline.

Per-record data problems (bad balances, bad decimals, missing prices) are
never raised; they degrade to defaults inside the normalizer.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PortfolioError(Exception):
    """Base error for a failed portfolio request."""

    kind = "portfolio_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class ValidationError(PortfolioError):
    """Malformed or missing input; raised before any upstream call."""

    kind = "validation_error"
    status_code = 400


class ConfigurationError(PortfolioError):
    """Required credential or endpoint is not configured."""

    kind = "configuration_error"
    status_code = 500


class UpstreamError(PortfolioError):
    """A page request failed or the provider answered with an unusable body."""

    kind = "upstream_error"
    status_code = 502

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.upstream_status is not None:
            payload["upstreamStatus"] = self.upstream_status
        if self.detail:
            payload["detail"] = self.detail
        return payload
