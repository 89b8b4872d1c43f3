"""Governance parameters of the fee share module."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from feeshare.coins import DEC_PRECISION, dec_with_prec

DEFAULT_ENABLE_FEE_SHARE = True
DEFAULT_DEVELOPER_SHARES = dec_with_prec(50, 2)
DEFAULT_ALLOWED_DENOMS: tuple[str, ...] = ()

PARAM_STORE_KEY_ENABLE_FEE_SHARE = b"EnableFeeShare"
PARAM_STORE_KEY_DEVELOPER_SHARES = b"DeveloperShares"
PARAM_STORE_KEY_ALLOWED_DENOMS = b"AllowedDenoms"


def validate_bool(value: Any) -> None:
    if not isinstance(value, bool):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")


def validate_shares(value: Any) -> None:
    if value is None:
        raise ValueError("invalid parameter: nil")
    if not isinstance(value, Decimal):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    if value < 0:
        raise ValueError(f"value cannot be negative: {value}")
    if value > 1:
        raise ValueError(f"value cannot be greater than 1: {value}")


def validate_array(value: Any) -> None:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    if any(denom == "" for denom in value):
        raise ValueError("denom cannot be blank")


@dataclass
class Params:
    """Whether fee sharing is on, the developers' share and the denoms paid out."""

    enable_fee_share: bool = False
    developer_shares: Decimal | None = None
    allowed_denoms: list[str] = field(default_factory=list)

    def validate(self) -> None:
        validate_bool(self.enable_fee_share)
        validate_shares(self.developer_shares)
        validate_array(self.allowed_denoms)

    def param_set_pairs(self) -> list[tuple[bytes, Any, Callable[[Any], None]]]:
        """Return (store key, value, validator) for every parameter."""
        return [
            (PARAM_STORE_KEY_ENABLE_FEE_SHARE, self.enable_fee_share, validate_bool),
            (PARAM_STORE_KEY_DEVELOPER_SHARES, self.developer_shares, validate_shares),
            (PARAM_STORE_KEY_ALLOWED_DENOMS, self.allowed_denoms, validate_array),
        ]

    def to_dict(self) -> dict[str, Any]:
        shares = (
            None if self.developer_shares is None else f"{self.developer_shares:.{DEC_PRECISION}f}"
        )
        return {
            "enable_fee_share": self.enable_fee_share,
            "developer_shares": shares,
            "allowed_denoms": list(self.allowed_denoms),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Params:
        shares = data.get("developer_shares")
        return cls(
            enable_fee_share=data.get("enable_fee_share", False),
            developer_shares=None if shares is None else Decimal(shares),
            allowed_denoms=list(data.get("allowed_denoms") or []),
        )


def default_params() -> Params:
    return Params(
        enable_fee_share=DEFAULT_ENABLE_FEE_SHARE,
        developer_shares=DEFAULT_DEVELOPER_SHARES,
        allowed_denoms=list(DEFAULT_ALLOWED_DENOMS),
    )