"""Paying contract developers their share of transaction fees."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Any, Protocol

from feeshare.address import AccAddress
from feeshare.coins import DEC_PRECISION, Coin, Coins, round_half_even
from feeshare.errors import (
    FeeShareError,
    FeeSharePaymentError,
    InsufficientFundsError,
    TxDecodeError,
)
from feeshare.keeper import FEE_COLLECTOR_NAME, Context
from feeshare.models import FeeShare
from feeshare.params import Params

_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)


class _Bank(Protocol):
    def send_coins_from_module_to_account(
        self, ctx: Any, sender_module: str, recipient: bytes, amount: Coins
    ) -> None: ...


class _FeeShareKeeper(Protocol):
    def get_params(self, ctx: Context) -> Params: ...

    def get_fee_share(self, ctx: Context, contract: bytes) -> FeeShare | None: ...


@dataclass
class MsgExecuteContract:
    """A call into a deployed contract."""

    sender: str = ""
    contract: str = ""
    msg: bytes = b"{}"
    funds: Coins = field(default_factory=Coins)


@dataclass
class Tx:
    """A transaction: its messages and the fee it paid."""

    msgs: list[Any] = field(default_factory=list)
    fee: Coins = field(default_factory=Coins)


def fee_pay_logic(fees: Iterable[Coin], gov_percent: Decimal, num_pairs: int) -> Coins:
    """Return the coins each of num_pairs withdrawers receives out of fees."""
    if num_pairs <= 0:
        raise ValueError(f"number of pairs must be positive, got {num_pairs}")
    split = Coins()
    for coin in Coins(fees).sorted():
        with localcontext() as dctx:
            dctx.prec = 200
            share = (Decimal(gov_percent) * coin.amount).quantize(_DEC_QUANTUM, rounding=ROUND_DOWN)
            per_pair = (share / num_pairs).quantize(_DEC_QUANTUM, rounding=ROUND_DOWN)
        reward = round_half_even(per_pair)
        if reward:
            split = split.add([Coin(coin.denom, reward)])
    return split


def fee_share_payout(
    ctx: Context,
    bank_keeper: _Bank,
    total_fees: Iterable[Coin],
    fee_share_keeper: _FeeShareKeeper,
    msgs: Sequence[Any],
) -> None:
    """Send the developers' share of total_fees to the withdrawers of called contracts."""
    params = fee_share_keeper.get_params(ctx)
    if not params.enable_fee_share:
        return

    to_pay: list[AccAddress] = []
    for msg in msgs:
        if not isinstance(msg, MsgExecuteContract):
            continue
        contract = AccAddress.from_bech32(msg.contract)
        share = fee_share_keeper.get_fee_share(ctx, contract)
        if share is None:
            continue
        withdrawer = share.withdrawer_addr()
        if withdrawer is not None and not withdrawer.is_empty():
            to_pay.append(withdrawer)

    if not to_pay:
        return

    total = Coins(total_fees)
    if not params.allowed_denoms:
        fees = total
    else:
        fees = Coins().add(
            fee
            for fee in total.sorted()
            for allowed in params.allowed_denoms
            if fee.denom == allowed
        )

    split = fee_pay_logic(fees, params.developer_shares, len(to_pay))
    for withdrawer in to_pay:
        try:
            bank_keeper.send_coins_from_module_to_account(ctx, FEE_COLLECTOR_NAME, withdrawer, split)
        except FeeShareError as exc:
            raise FeeSharePaymentError(
                f"failed to pay fees to contract developer: {exc}"
            ) from exc


@dataclass
class FeeSharePayoutDecorator:
    """Ante step that pays developers out of the already collected fee."""

    bank_keeper: _Bank
    fee_share_keeper: _FeeShareKeeper

    def ante_handle(
        self,
        ctx: Context,
        tx: Any,
        simulate: bool,
        next_handler: Callable[[Context, Any, bool], Any],
    ) -> Any:
        if not isinstance(tx, Tx):
            raise TxDecodeError("Tx must be a FeeTx")
        try:
            fee_share_payout(ctx, self.bank_keeper, tx.fee, self.fee_share_keeper, tx.msgs)
        except FeeShareError as exc:
            raise InsufficientFundsError(str(exc)) from exc
        return next_handler(ctx, tx, simulate)