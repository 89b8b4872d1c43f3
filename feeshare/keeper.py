"""State access of the fee share module: stores, context and the keeper."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from feeshare.address import AccAddress
from feeshare.coins import BankKeeper, Coins
from feeshare.errors import InvalidAddressError
from feeshare.keys import (
    KEY_PREFIX_DEPLOYER,
    KEY_PREFIX_FEE_SHARE,
    KEY_PREFIX_WITHDRAWER,
    MODULE_NAME,
    STORE_KEY,
)
from feeshare.models import FeeShare
from feeshare.params import (
    PARAM_STORE_KEY_ALLOWED_DENOMS,
    PARAM_STORE_KEY_DEVELOPER_SHARES,
    PARAM_STORE_KEY_ENABLE_FEE_SHARE,
    Params,
)

FEE_COLLECTOR_NAME = "fee_collector"
PARAMS_STORE_KEY = "params"

_PARAM_FIELDS = {
    PARAM_STORE_KEY_ENABLE_FEE_SHARE: "enable_fee_share",
    PARAM_STORE_KEY_DEVELOPER_SHARES: "developer_shares",
    PARAM_STORE_KEY_ALLOWED_DENOMS: "allowed_denoms",
}


def _check_key(key: bytes) -> bytes:
    key = bytes(key)
    if not key:
        raise ValueError("key is empty")
    return key


class KVStore:
    """An in-memory key-value store iterated in key order."""

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] = {}

    def get(self, key: bytes) -> bytes | None:
        return self._data.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        if value is None:
            raise ValueError("value is nil")
        self._data[_check_key(key)] = bytes(value)

    def delete(self, key: bytes) -> None:
        self._data.pop(bytes(key), None)

    def has(self, key: bytes) -> bool:
        return bytes(key) in self._data

    def iterate(self, prefix: bytes = b"") -> Iterator[tuple[bytes, bytes]]:
        """Yield (key, value) for every key starting with prefix, in order."""
        prefix = bytes(prefix)
        snapshot = sorted(item for item in self._data.items() if item[0].startswith(prefix))
        yield from snapshot

    def __len__(self) -> int:
        return len(self._data)


class PrefixStore:
    """A view of a parent store restricted to keys under a fixed prefix."""

    def __init__(self, parent: KVStore | PrefixStore, prefix: bytes) -> None:
        self.parent = parent
        self.prefix = bytes(prefix)

    def get(self, key: bytes) -> bytes | None:
        return self.parent.get(self.prefix + _check_key(key))

    def set(self, key: bytes, value: bytes) -> None:
        self.parent.set(self.prefix + _check_key(key), value)

    def delete(self, key: bytes) -> None:
        self.parent.delete(self.prefix + _check_key(key))

    def has(self, key: bytes) -> bool:
        return self.parent.has(self.prefix + _check_key(key))

    def iterate(self, prefix: bytes = b"") -> Iterator[tuple[bytes, bytes]]:
        """Yield (key, value) with keys relative to this store's prefix."""
        cut = len(self.prefix)
        for key, value in self.parent.iterate(self.prefix + bytes(prefix)):
            yield key[cut:], value


@dataclass
class Event:
    """A typed event with ordered string attributes."""

    type: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class Context:
    """Stores and emitted events of one block or transaction."""

    stores: dict[str, KVStore] = field(default_factory=dict)
    events: list[Event] = field(default_factory=list)

    def kv_store(self, name: str) -> KVStore:
        """The store registered under name, created on first use."""
        return self.stores.setdefault(name, KVStore())

    def emit(self, *args: Event) -> None:
        self.events.extend(args)


@dataclass
class ContractInfo:
    """What the contract runtime knows about an instantiated contract."""

    code_id: int = 0
    creator: str = ""
    admin: str = ""
    label: str = ""


@dataclass
class WasmKeeper:
    """Instantiated contracts, keyed by their raw address."""

    contracts: dict[bytes, ContractInfo] = field(default_factory=dict)

    def get_contract_info(self, ctx: Context, contract: bytes) -> ContractInfo | None:
        return self.contracts.get(bytes(contract))

    def has_contract_info(self, ctx: Context, contract: bytes) -> bool:
        return bytes(contract) in self.contracts


def _encode_fee_share(fee_share: FeeShare) -> bytes:
    return json.dumps(fee_share.to_dict(), sort_keys=True).encode()


def _decode_fee_share(raw: bytes) -> FeeShare:
    return FeeShare.from_dict(json.loads(raw))


@dataclass
class Keeper:
    """Reads and writes fee share registrations, their indexes and the params."""

    bank_keeper: BankKeeper = field(default_factory=BankKeeper)
    wasm_keeper: WasmKeeper = field(default_factory=WasmKeeper)
    fee_collector_name: str = FEE_COLLECTOR_NAME
    store_key: str = STORE_KEY
    param_space: str = MODULE_NAME
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(f"x/{MODULE_NAME}"), repr=False, compare=False
    )

    def _store(self, ctx: Context, prefix: bytes) -> PrefixStore:
        return PrefixStore(ctx.kv_store(self.store_key), prefix)

    def _param_store(self, ctx: Context) -> PrefixStore:
        return PrefixStore(ctx.kv_store(PARAMS_STORE_KEY), f"{self.param_space}/".encode())

    # registrations

    def get_fee_shares(self, ctx: Context) -> list[FeeShare]:
        return [_decode_fee_share(raw) for _, raw in self._store(ctx, KEY_PREFIX_FEE_SHARE).iterate()]

    def iterate_fee_shares(self, ctx: Context, handler: Callable[[FeeShare], bool]) -> None:
        """Call handler on each registration until it returns True."""
        for _, raw in self._store(ctx, KEY_PREFIX_FEE_SHARE).iterate():
            if handler(_decode_fee_share(raw)):
                break

    def get_fee_share(self, ctx: Context, contract: bytes) -> FeeShare | None:
        raw = self._store(ctx, KEY_PREFIX_FEE_SHARE).get(bytes(contract))
        if not raw:
            return None
        return _decode_fee_share(raw)

    def set_fee_share(self, ctx: Context, fee_share: FeeShare) -> None:
        key = fee_share.contract_addr()
        if key is None:
            raise InvalidAddressError(f"invalid contract address {fee_share.contract_address!r}")
        self._store(ctx, KEY_PREFIX_FEE_SHARE).set(key, _encode_fee_share(fee_share))

    def delete_fee_share(self, ctx: Context, fee_share: FeeShare) -> None:
        key = fee_share.contract_addr()
        if key is None:
            raise InvalidAddressError(f"invalid contract address {fee_share.contract_address!r}")
        self._store(ctx, KEY_PREFIX_FEE_SHARE).delete(key)

    def is_fee_share_registered(self, ctx: Context, contract: bytes) -> bool:
        return self._store(ctx, KEY_PREFIX_FEE_SHARE).has(bytes(contract))

    # indexes

    def set_deployer_map(self, ctx: Context, deployer: bytes, contract: bytes) -> None:
        self._store(ctx, KEY_PREFIX_DEPLOYER).set(bytes(deployer) + bytes(contract), b"\x01")

    def delete_deployer_map(self, ctx: Context, deployer: bytes, contract: bytes) -> None:
        self._store(ctx, KEY_PREFIX_DEPLOYER).delete(bytes(deployer) + bytes(contract))

    def is_deployer_map_set(self, ctx: Context, deployer: bytes, contract: bytes) -> bool:
        return self._store(ctx, KEY_PREFIX_DEPLOYER).has(bytes(deployer) + bytes(contract))

    def set_withdrawer_map(self, ctx: Context, withdrawer: bytes, contract: bytes) -> None:
        self._store(ctx, KEY_PREFIX_WITHDRAWER).set(bytes(withdrawer) + bytes(contract), b"\x01")

    def delete_withdrawer_map(self, ctx: Context, withdrawer: bytes, contract: bytes) -> None:
        self._store(ctx, KEY_PREFIX_WITHDRAWER).delete(bytes(withdrawer) + bytes(contract))

    def is_withdrawer_map_set(self, ctx: Context, withdrawer: bytes, contract: bytes) -> bool:
        return self._store(ctx, KEY_PREFIX_WITHDRAWER).has(bytes(withdrawer) + bytes(contract))

    # params

    def get_params(self, ctx: Context) -> Params:
        """The stored params; any parameter never set keeps its zero value."""
        store = self._param_store(ctx)
        data: dict[str, Any] = {}
        for key, name in _PARAM_FIELDS.items():
            raw = store.get(key)
            if raw is not None:
                data[name] = json.loads(raw)
        return Params.from_dict(data)

    def set_params(self, ctx: Context, params: Params) -> None:
        """Validate and store every parameter."""
        store = self._param_store(ctx)
        encoded = params.to_dict()
        for key, value, validator in params.param_set_pairs():
            validator(value)
            store.set(key, json.dumps(encoded[_PARAM_FIELDS[key]]).encode())

    # payments

    def send_coins_from_account_to_fee_collector(
        self, ctx: Context, sender: bytes, amount: Coins
    ) -> None:
        if not sender:
            raise InvalidAddressError("senderAddr address cannot be empty")
        self.bank_keeper.send_coins_from_account_to_module(
            ctx, sender, self.fee_collector_name, amount
        )

    def send_coins_from_fee_collector_to_account(
        self, ctx: Context, recipient: bytes, amount: Coins
    ) -> None:
        if not recipient:
            raise InvalidAddressError("recipient address cannot be empty")
        self.bank_keeper.send_coins_from_module_to_account(
            ctx, self.fee_collector_name, recipient, amount
        )