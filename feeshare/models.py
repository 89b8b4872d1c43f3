"""Fee share registrations and the module genesis state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from feeshare.address import AccAddress
from feeshare.errors import InvalidAddressError
from feeshare.params import Params, default_params


def _parse(address: str) -> AccAddress | None:
    try:
        return AccAddress.from_bech32(address)
    except InvalidAddressError:
        return None


@dataclass
class FeeShare:
    """A contract registered to pass part of its fees to a withdrawer."""

    contract_address: str = ""
    deployer_address: str = ""
    withdrawer_address: str = ""

    def contract_addr(self) -> AccAddress | None:
        return _parse(self.contract_address)

    def deployer_addr(self) -> AccAddress | None:
        return _parse(self.deployer_address)

    def withdrawer_addr(self) -> AccAddress | None:
        """The account receiving the shared fees, or None if unset or invalid."""
        return _parse(self.withdrawer_address)

    def validate(self) -> None:
        """Check the addresses without consulting any state."""
        AccAddress.from_bech32(self.contract_address)
        AccAddress.from_bech32(self.deployer_address)
        if self.withdrawer_address == "":
            raise InvalidAddressError("withdrawer address cannot be empty")
        AccAddress.from_bech32(self.withdrawer_address)

    def to_dict(self) -> dict[str, str]:
        return {
            "contract_address": self.contract_address,
            "deployer_address": self.deployer_address,
            "withdrawer_address": self.withdrawer_address,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeeShare:
        return cls(
            contract_address=data.get("contract_address", ""),
            deployer_address=data.get("deployer_address", ""),
            withdrawer_address=data.get("withdrawer_address", ""),
        )


def new_fee_share(contract: AccAddress, deployer: AccAddress, withdrawer: AccAddress) -> FeeShare:
    return FeeShare(str(contract), str(deployer), str(withdrawer))


@dataclass
class GenesisState:
    """Parameters and registrations the module starts from."""

    params: Params = field(default_factory=Params)
    fee_shares: list[FeeShare] = field(default_factory=list)

    def validate(self) -> None:
        seen: set[str] = set()
        for fee_share in self.fee_shares:
            if fee_share.contract_address in seen:
                raise ValueError(f"contract duplicated on genesis '{fee_share.contract_address}'")
            fee_share.validate()
            seen.add(fee_share.contract_address)
        self.params.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "params": self.params.to_dict(),
            "fee_share": [fs.to_dict() for fs in self.fee_shares],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenesisState:
        return cls(
            params=Params.from_dict(data.get("params") or {}),
            fee_shares=[FeeShare.from_dict(fs) for fs in data.get("fee_share") or []],
        )


def new_genesis_state(params: Params, fee_shares: list[FeeShare]) -> GenesisState:
    return GenesisState(params=params, fee_shares=list(fee_shares))


def default_genesis_state() -> GenesisState:
    return GenesisState(params=default_params())