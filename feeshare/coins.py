"""Coins, fixed point decimals and an in-memory bank."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Any, overload

from feeshare.errors import InsufficientFundsError

DEC_PRECISION = 18
_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)
_DENOM_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9/:._-]{2,127}")


def dec_with_prec(value: int, precision: int) -> Decimal:
    """Return value * 10**-precision as an 18-place decimal."""
    if not 0 <= precision <= DEC_PRECISION:
        raise ValueError(f"too much precision, maximum {DEC_PRECISION}, provided {precision}")
    with localcontext() as ctx:
        ctx.prec = 200
        return Decimal(value).scaleb(-precision).quantize(_DEC_QUANTUM)


def round_half_even(value: Decimal | int | str) -> int:
    """Round to 18 places, then to the nearest integer, ties to even."""
    with localcontext() as ctx:
        ctx.prec = 200
        dec = Decimal(value).quantize(_DEC_QUANTUM, rounding=ROUND_HALF_EVEN)
        return int(dec.quantize(Decimal(1), rounding=ROUND_HALF_EVEN))


@dataclass(frozen=True)
class Coin:
    """An amount of one denomination."""

    denom: str
    amount: int

    def __post_init__(self) -> None:
        if not _DENOM_PATTERN.fullmatch(self.denom):
            raise ValueError(f"invalid denom: {self.denom!r}")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"coin amount must be an integer, got {type(self.amount).__name__}")
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


class Coins(Sequence[Coin]):
    """A set of coins kept sorted by denomination, without zero amounts."""

    def __init__(self, coins: Iterable[Coin] = ()) -> None:
        by_denom: dict[str, Coin] = {}
        for coin in coins:
            if coin.denom in by_denom:
                raise ValueError(f"duplicate denomination {coin.denom}")
            by_denom[coin.denom] = coin
        self._coins = tuple(
            sorted((c for c in by_denom.values() if c.amount), key=lambda c: c.denom)
        )

    @overload
    def __getitem__(self, index: int) -> Coin: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Coin]: ...

    def __getitem__(self, index: Any) -> Any:
        return self._coins[index]

    def __len__(self) -> int:
        return len(self._coins)

    def __iter__(self) -> Iterator[Coin]:
        return iter(self._coins)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coins):
            return NotImplemented
        return self._coins == other._coins

    def __hash__(self) -> int:
        return hash(self._coins)

    def __repr__(self) -> str:
        return f"Coins({list(self._coins)!r})"

    def __str__(self) -> str:
        return ",".join(str(c) for c in self._coins)

    def add(self, other: Iterable[Coin]) -> Coins:
        """Return the sum of both sets of coins."""
        totals = {c.denom: c.amount for c in self}
        for coin in other:
            totals[coin.denom] = totals.get(coin.denom, 0) + coin.amount
        return Coins(Coin(denom, amount) for denom, amount in totals.items())

    def amount_of(self, denom: str) -> int:
        return next((c.amount for c in self if c.denom == denom), 0)

    def sorted(self) -> Coins:
        """Return a copy ordered by denomination."""
        return Coins(self)

    def is_zero(self) -> bool:
        return len(self._coins) == 0


def _subtract(balance: Coins, amount: Coins) -> Coins:
    remaining = {c.denom: c.amount for c in balance}
    for coin in amount:
        left = remaining.get(coin.denom, 0) - coin.amount
        if left < 0:
            raise InsufficientFundsError(
                f"spendable balance {balance.amount_of(coin.denom)}{coin.denom} is smaller than {coin}"
            )
        remaining[coin.denom] = left
    return Coins(Coin(denom, value) for denom, value in remaining.items())


@dataclass
class BankKeeper:
    """Balances of accounts and module accounts, moved between on request."""

    accounts: dict[bytes, Coins] = field(default_factory=dict)
    modules: dict[str, Coins] = field(default_factory=dict)

    def send_coins_from_module_to_account(
        self, ctx: Any, sender_module: str, recipient: bytes, amount: Coins
    ) -> None:
        amount = Coins(amount)
        remaining = _subtract(self.modules.get(sender_module, Coins()), amount)
        self.modules[sender_module] = remaining
        key = bytes(recipient)
        self.accounts[key] = self.accounts.get(key, Coins()).add(amount)

    def send_coins_from_account_to_module(
        self, ctx: Any, sender: bytes, recipient_module: str, amount: Coins
    ) -> None:
        amount = Coins(amount)
        key = bytes(sender)
        remaining = _subtract(self.accounts.get(key, Coins()), amount)
        self.accounts[key] = remaining
        self.modules[recipient_module] = self.modules.get(recipient_module, Coins()).add(amount)