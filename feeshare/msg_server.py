"""Handlers of the fee share transaction messages."""

from __future__ import annotations

from dataclasses import dataclass

from feeshare.address import AccAddress
from feeshare.errors import (
    ContractNotRegisteredError,
    FeeShareAlreadyRegisteredError,
    FeeShareDisabledError,
    InvalidAddressError,
    InvalidWithdrawerError,
    NoContractDeployedError,
    UnauthorizedError,
)
from feeshare.keeper import Context, ContractInfo, Event, Keeper
from feeshare.keys import (
    ATTRIBUTE_KEY_CONTRACT,
    ATTRIBUTE_KEY_SENDER,
    ATTRIBUTE_KEY_WITHDRAWER_ADDRESS,
    EVENT_TYPE_CANCEL_FEE_SHARE,
    EVENT_TYPE_REGISTER_FEE_SHARE,
    EVENT_TYPE_UPDATE_FEE_SHARE,
)
from feeshare.models import new_fee_share
from feeshare.msgs import MsgCancelFeeShare, MsgRegisterFeeShare, MsgUpdateFeeShare


def _try_parse(address: str) -> AccAddress | None:
    try:
        return AccAddress.from_bech32(address)
    except InvalidAddressError:
        return None


def _parse_contract(address: str) -> AccAddress:
    try:
        return AccAddress.from_bech32(address)
    except InvalidAddressError as exc:
        raise InvalidAddressError(f"invalid contract address ({exc})") from exc


@dataclass
class MsgServer:
    """Registers, updates and cancels fee shares on behalf of contract owners."""

    keeper: Keeper

    def _require_enabled(self, ctx: Context) -> None:
        if not self.keeper.get_params(ctx).enable_fee_share:
            raise FeeShareDisabledError()

    def _contract_info(self, ctx: Context, contract: AccAddress) -> ContractInfo:
        info = self.keeper.wasm_keeper.get_contract_info(ctx, contract)
        if info is None:
            raise NoContractDeployedError(f"no contract info for {contract}")
        return info

    def is_contract_created_from_factory(self, ctx: Context, info: ContractInfo) -> bool:
        """Whether the contract's admin, or its creator when it has no admin, is a contract."""
        creator = _try_parse(info.creator)
        if creator is None:
            return False
        if not info.admin:
            return self.keeper.wasm_keeper.has_contract_info(ctx, creator)
        admin = _try_parse(info.admin)
        if admin is None:
            return False
        return self.keeper.wasm_keeper.has_contract_info(ctx, admin)

    def get_contract_admin_or_creator_address(
        self, ctx: Context, contract: AccAddress, deployer: str
    ) -> AccAddress:
        """Return the controlling account if deployer is the admin, or the creator when unset."""
        if _try_parse(deployer) is None:
            raise InvalidAddressError(f"invalid deployer address {deployer}")

        info = self._contract_info(ctx, contract)
        if not info.admin:
            if info.creator != deployer:
                raise UnauthorizedError(f"you are not the creator of this contract {info.creator}")
            creator = _try_parse(info.creator)
            if creator is None:
                raise InvalidAddressError(f"invalid creator address {info.creator}")
            return creator

        if info.admin != deployer:
            raise UnauthorizedError(f"you are not an admin of this contract {deployer}")
        admin = _try_parse(info.admin)
        if admin is None:
            raise InvalidAddressError(f"invalid admin address {info.admin}")
        return admin

    def register_fee_share(self, ctx: Context, msg: MsgRegisterFeeShare) -> None:
        """Register a contract to receive part of its transaction fees."""
        self._require_enabled(ctx)
        contract = _parse_contract(msg.contract_address)

        if self.keeper.is_fee_share_registered(ctx, contract):
            raise FeeShareAlreadyRegisteredError(f"contract is already registered {contract}")

        withdrawer = _try_parse(msg.withdrawer_address)
        if withdrawer is None:
            raise InvalidAddressError(f"invalid withdrawer address {msg.withdrawer_address}")

        info = self._contract_info(ctx, contract)
        if self.is_contract_created_from_factory(ctx, info):
            if msg.withdrawer_address != msg.contract_address:
                raise InvalidWithdrawerError(
                    "withdrawer address must be the same as the contract address if it is "
                    f"from a factory contract withdraw:{msg.withdrawer_address} "
                    f"contract:{msg.contract_address}"
                )
            msg.deployer_address = msg.contract_address
            deployer = AccAddress.from_bech32(msg.deployer_address)
        else:
            deployer = self.get_contract_admin_or_creator_address(
                ctx, contract, msg.deployer_address
            )

        self.keeper.set_fee_share(ctx, new_fee_share(contract, deployer, withdrawer))
        self.keeper.set_deployer_map(ctx, deployer, contract)
        self.keeper.set_withdrawer_map(ctx, withdrawer, contract)

        self.keeper.logger.debug(
            "registering contract for transaction fees contract=%s deployer=%s withdraw=%s",
            msg.contract_address,
            msg.deployer_address,
            msg.withdrawer_address,
        )
        ctx.emit(
            Event(
                EVENT_TYPE_REGISTER_FEE_SHARE,
                {
                    ATTRIBUTE_KEY_SENDER: msg.deployer_address,
                    ATTRIBUTE_KEY_CONTRACT: msg.contract_address,
                    ATTRIBUTE_KEY_WITHDRAWER_ADDRESS: msg.withdrawer_address,
                },
            )
        )

    def update_fee_share(self, ctx: Context, msg: MsgUpdateFeeShare) -> None:
        """Change the withdrawer of a registered contract."""
        self._require_enabled(ctx)
        contract = _parse_contract(msg.contract_address)

        fee_share = self.keeper.get_fee_share(ctx, contract)
        if fee_share is None:
            raise ContractNotRegisteredError(f"contract {msg.contract_address} is not registered")

        if msg.withdrawer_address == fee_share.withdrawer_address:
            raise FeeShareAlreadyRegisteredError(
                f"feeshare with withdraw address {msg.withdrawer_address} is already registered"
            )

        self.get_contract_admin_or_creator_address(ctx, contract, msg.deployer_address)

        try:
            old_withdrawer = AccAddress.from_bech32(fee_share.withdrawer_address)
        except InvalidAddressError as exc:
            raise InvalidAddressError(f"invalid withdrawer address ({exc})") from exc
        new_withdrawer = _try_parse(msg.withdrawer_address)
        if new_withdrawer is None:
            raise InvalidAddressError(f"invalid WithdrawerAddress {msg.withdrawer_address}")

        self.keeper.delete_withdrawer_map(ctx, old_withdrawer, contract)
        self.keeper.set_withdrawer_map(ctx, new_withdrawer, contract)

        fee_share.withdrawer_address = str(new_withdrawer)
        self.keeper.set_fee_share(ctx, fee_share)

        ctx.emit(
            Event(
                EVENT_TYPE_UPDATE_FEE_SHARE,
                {
                    ATTRIBUTE_KEY_CONTRACT: msg.contract_address,
                    ATTRIBUTE_KEY_SENDER: msg.deployer_address,
                    ATTRIBUTE_KEY_WITHDRAWER_ADDRESS: msg.withdrawer_address,
                },
            )
        )

    def cancel_fee_share(self, ctx: Context, msg: MsgCancelFeeShare) -> None:
        """Remove the fee share of a contract and its index entries."""
        self._require_enabled(ctx)
        contract = _parse_contract(msg.contract_address)

        fee_share = self.keeper.get_fee_share(ctx, contract)
        if fee_share is None:
            raise ContractNotRegisteredError(f"contract {msg.contract_address} is not registered")

        self.get_contract_admin_or_creator_address(ctx, contract, msg.deployer_address)

        self.keeper.delete_fee_share(ctx, fee_share)
        deployer = fee_share.deployer_addr()
        if deployer is not None:
            self.keeper.delete_deployer_map(ctx, deployer, contract)
        withdrawer = fee_share.withdrawer_addr()
        if withdrawer is not None:
            self.keeper.delete_withdrawer_map(ctx, withdrawer, contract)

        ctx.emit(
            Event(
                EVENT_TYPE_CANCEL_FEE_SHARE,
                {
                    ATTRIBUTE_KEY_SENDER: msg.deployer_address,
                    ATTRIBUTE_KEY_CONTRACT: msg.contract_address,
                },
            )
        )