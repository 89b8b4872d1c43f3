"""Genesis import and export, and the module's application hooks."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from feeshare.keeper import Context, Keeper
from feeshare.keys import MODULE_NAME
from feeshare.models import GenesisState, default_genesis_state

CONSENSUS_VERSION = 1


def init_genesis(ctx: Context, keeper: Keeper, data: GenesisState) -> None:
    """Store the params and every registration of a genesis state."""
    keeper.set_params(ctx, data.params)
    for share in data.fee_shares:
        contract = share.contract_addr()
        deployer = share.deployer_addr()
        withdrawer = share.withdrawer_addr()

        keeper.set_fee_share(ctx, share)
        keeper.set_deployer_map(ctx, deployer or b"", contract or b"")
        if withdrawer:
            keeper.set_withdrawer_map(ctx, withdrawer, contract or b"")


def export_genesis(ctx: Context, keeper: Keeper) -> GenesisState:
    return GenesisState(params=keeper.get_params(ctx), fee_shares=keeper.get_fee_shares(ctx))


def _encode(state: GenesisState) -> bytes:
    return json.dumps(state.to_dict(), sort_keys=True).encode()


def _decode(data: bytes | str) -> GenesisState:
    try:
        parsed = json.loads(data)
    except ValueError as exc:
        raise ValueError(f"failed to unmarshal {MODULE_NAME} genesis state: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError(f"failed to unmarshal {MODULE_NAME} genesis state: not an object")
    return GenesisState.from_dict(parsed)


@dataclass
class AppModule:
    """The fee share module as the application sees it."""

    keeper: Keeper
    account_keeper: Any = None

    def name(self) -> str:
        return MODULE_NAME

    def consensus_version(self) -> int:
        return CONSENSUS_VERSION

    def default_genesis(self) -> bytes:
        return _encode(default_genesis_state())

    def validate_genesis(self, data: bytes | str) -> None:
        _decode(data).validate()

    def init_genesis(self, ctx: Context, data: bytes | str) -> list[Any]:
        """Import a JSON genesis state; no validator updates result."""
        init_genesis(ctx, self.keeper, _decode(data))
        return []

    def export_genesis(self, ctx: Context) -> bytes:
        return _encode(export_genesis(ctx, self.keeper))

    def end_block(self, ctx: Context) -> list[Any]:
        return []