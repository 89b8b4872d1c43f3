"""Transaction messages, query requests and their registered names."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, ClassVar

from feeshare.address import AccAddress
from feeshare.errors import InvalidAddressError
from feeshare.keys import ROUTER_KEY

TYPE_MSG_REGISTER_FEE_SHARE = "register_feeshare"
TYPE_MSG_CANCEL_FEE_SHARE = "cancel_feeshare"
TYPE_MSG_UPDATE_FEE_SHARE = "update_feeshare"

CANCEL_FEE_SHARE_NAME = "juno/MsgCancelFeeShare"
REGISTER_FEE_SHARE_NAME = "juno/MsgRegisterFeeShare"
UPDATE_FEE_SHARE_NAME = "juno/MsgUpdateFeeShare"

_PROTO_PACKAGE = "juno.feeshare.v1"


def _require_address(address: str, context: str) -> AccAddress:
    """Parse an address, wrapping any failure with the given context."""
    try:
        return AccAddress.from_bech32(address)
    except InvalidAddressError as exc:
        raise InvalidAddressError(f"{context}: {exc.detail}") from exc


def _sign_bytes(msg: Any, name: str) -> bytes:
    """Canonical JSON, keys sorted, that the deployer signs."""
    value = {key: item for key, item in asdict(msg).items() if item}
    document = {"type": name, "value": value}
    return json.dumps(document, sort_keys=True, separators=(",", ":")).encode()


def _signers(deployer_address: str) -> list[AccAddress]:
    """The deployer; an empty address if it does not parse."""
    try:
        signer = AccAddress.from_bech32(deployer_address)
    except InvalidAddressError:
        signer = AccAddress()
    return [signer]


@dataclass
class MsgRegisterFeeShare:
    """Register a contract so that a withdrawer receives part of its fees."""

    AMINO_NAME: ClassVar[str] = REGISTER_FEE_SHARE_NAME
    TYPE_URL: ClassVar[str] = f"/{_PROTO_PACKAGE}.MsgRegisterFeeShare"

    contract_address: str = ""
    deployer_address: str = ""
    withdrawer_address: str = ""

    def route(self) -> str:
        return ROUTER_KEY

    def type(self) -> str:
        return TYPE_MSG_REGISTER_FEE_SHARE

    def validate_basic(self) -> None:
        _require_address(self.deployer_address, f"invalid deployer address {self.deployer_address}")
        _require_address(self.contract_address, f"invalid contract address {self.contract_address}")
        if self.withdrawer_address != "":
            _require_address(
                self.withdrawer_address, f"invalid withdraw address {self.withdrawer_address}"
            )

    def get_sign_bytes(self) -> bytes:
        return _sign_bytes(self, self.AMINO_NAME)

    def get_signers(self) -> list[AccAddress]:
        return _signers(self.deployer_address)


@dataclass
class MsgCancelFeeShare:
    """Remove a contract's fee share registration."""

    AMINO_NAME: ClassVar[str] = CANCEL_FEE_SHARE_NAME
    TYPE_URL: ClassVar[str] = f"/{_PROTO_PACKAGE}.MsgCancelFeeShare"

    contract_address: str = ""
    deployer_address: str = ""

    def route(self) -> str:
        return ROUTER_KEY

    def type(self) -> str:
        return TYPE_MSG_CANCEL_FEE_SHARE

    def validate_basic(self) -> None:
        context = f"invalid deployer address {self.deployer_address}"
        _require_address(self.deployer_address, context)
        _require_address(self.contract_address, context)

    def get_sign_bytes(self) -> bytes:
        return _sign_bytes(self, self.AMINO_NAME)

    def get_signers(self) -> list[AccAddress]:
        return _signers(self.deployer_address)


@dataclass
class MsgUpdateFeeShare:
    """Change the withdrawer of a registered contract."""

    AMINO_NAME: ClassVar[str] = UPDATE_FEE_SHARE_NAME
    TYPE_URL: ClassVar[str] = f"/{_PROTO_PACKAGE}.MsgUpdateFeeShare"

    contract_address: str = ""
    deployer_address: str = ""
    withdrawer_address: str = ""

    def route(self) -> str:
        return ROUTER_KEY

    def type(self) -> str:
        return TYPE_MSG_UPDATE_FEE_SHARE

    def validate_basic(self) -> None:
        _require_address(self.deployer_address, f"invalid deployer address {self.deployer_address}")
        _require_address(self.contract_address, f"invalid contract address {self.contract_address}")
        _require_address(
            self.withdrawer_address, f"invalid withdraw address {self.withdrawer_address}"
        )

    def get_sign_bytes(self) -> bytes:
        return _sign_bytes(self, self.AMINO_NAME)

    def get_signers(self) -> list[AccAddress]:
        return _signers(self.deployer_address)


def new_msg_register_fee_share(
    contract: AccAddress, deployer: AccAddress, withdrawer: AccAddress | None
) -> MsgRegisterFeeShare:
    return MsgRegisterFeeShare(
        contract_address=str(contract),
        deployer_address=str(deployer),
        withdrawer_address="" if withdrawer is None else str(withdrawer),
    )


def new_msg_cancel_fee_share(contract: AccAddress, deployer: AccAddress) -> MsgCancelFeeShare:
    return MsgCancelFeeShare(contract_address=str(contract), deployer_address=str(deployer))


def new_msg_update_fee_share(
    contract: AccAddress, deployer: AccAddress, withdrawer: AccAddress
) -> MsgUpdateFeeShare:
    return MsgUpdateFeeShare(
        contract_address=str(contract),
        deployer_address=str(deployer),
        withdrawer_address=str(withdrawer),
    )


_MESSAGE_CLASSES: tuple[type, ...] = (
    MsgRegisterFeeShare,
    MsgCancelFeeShare,
    MsgUpdateFeeShare,
)


def registered_message_types() -> dict[str, type]:
    """Map the type URL of every module message to its class."""
    return {cls.TYPE_URL: cls for cls in _MESSAGE_CLASSES}


def amino_name(msg: Any) -> str:
    """The legacy JSON name of a message instance or class."""
    cls = msg if isinstance(msg, type) else type(msg)
    if cls not in _MESSAGE_CLASSES:
        raise TypeError(f"{cls.__name__} is not a registered message")
    return cls.AMINO_NAME


@dataclass
class QueryFeeShareRequest:
    """Ask for the registration of one contract."""

    contract_address: str = ""

    def validate_basic(self) -> None:
        _require_address(self.contract_address, f"invalid contract address {self.contract_address}")


@dataclass
class QueryDeployerFeeSharesRequest:
    """Ask for the contracts a deployer has registered."""

    deployer_address: str = ""
    pagination: Any = None

    def validate_basic(self) -> None:
        _require_address(self.deployer_address, f"invalid deployer address {self.deployer_address}")


@dataclass
class QueryWithdrawerFeeSharesRequest:
    """Ask for the contracts paying out to a withdrawer."""

    withdrawer_address: str = ""
    pagination: Any = None

    def validate_basic(self) -> None:
        _require_address(
            self.withdrawer_address, f"invalid withdraw address {self.withdrawer_address}"
        )