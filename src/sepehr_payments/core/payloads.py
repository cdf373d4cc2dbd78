"""
Request and response bodies for the Sepehr GetToken and Advice endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

__all__ = [
    "AdviceRequest",
    "AdviceResponse",
    "GetTokenRequest",
    "GetTokenResponse",
]

_ADVICE_OK_STATUSES = frozenset({"ok", "duplicate"})


@dataclass(frozen=True)
class GetTokenRequest:
    amount: int
    invoice_id: str
    terminal_id: int
    callback_url: str
    payload: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "Amount": self.amount,
            "callbackURL": self.callback_url,
            "invoiceID": self.invoice_id,
            "terminalID": self.terminal_id,
            "payload": self.payload,
        }


@dataclass(frozen=True)
class GetTokenResponse:
    status: Optional[int]
    access_token: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        """
        The gateway reports ``Status == 0`` when a purchase token was issued.
        """
        return self.status == 0 and bool(self.access_token)

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "GetTokenResponse":
        status = payload.get("Status")
        return cls(
            status=int(status) if status is not None else None,
            access_token=payload.get("Accesstoken") or payload.get("AccessToken"),
            raw=payload,
        )


@dataclass(frozen=True)
class AdviceRequest:
    digital_receipt: str
    terminal_id: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "digitalreceipt": self.digital_receipt,
            "Tid": self.terminal_id,
        }


@dataclass(frozen=True)
class AdviceResponse:
    status: Optional[str]
    return_id: Optional[str]
    message: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        # Duplicate means the receipt was already confirmed by an earlier advice.
        return (self.status or "").lower() in _ADVICE_OK_STATUSES

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "AdviceResponse":
        return_id = payload.get("ReturnId")
        return cls(
            status=payload.get("Status"),
            return_id=str(return_id) if return_id is not None else None,
            message=payload.get("Message"),
            raw=payload,
        )
