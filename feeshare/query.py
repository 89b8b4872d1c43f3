"""Read-only queries over fee share registrations, with pagination."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Protocol

from feeshare.address import BECH32_PREFIX, AccAddress
from feeshare.errors import InvalidAddressError, QueryError, StatusCode
from feeshare.keeper import Context, Keeper, PrefixStore
from feeshare.keys import KEY_PREFIX_FEE_SHARE, key_prefix_deployer, key_prefix_withdrawer
from feeshare.models import FeeShare
from feeshare.msgs import (
    QueryDeployerFeeSharesRequest,
    QueryFeeShareRequest,
    QueryWithdrawerFeeSharesRequest,
)
from feeshare.params import Params

DEFAULT_LIMIT = 100


class _IterableStore(Protocol):
    def iterate(self, prefix: bytes = ...) -> Iterator[tuple[bytes, bytes]]: ...


@dataclass
class PageRequest:
    """Where a page starts (a key or an offset) and how long it is."""

    key: bytes | None = None
    offset: int = 0
    limit: int = 0
    count_total: bool = False

    def __post_init__(self) -> None:
        if self.offset < 0 or self.limit < 0:
            raise ValueError("offset and limit cannot be negative")


@dataclass
class PageResponse:
    """The key the next page starts at, and the total when it was counted."""

    next_key: bytes | None = None
    total: int = 0


@dataclass
class QueryFeeSharesRequest:
    pagination: PageRequest | None = None


@dataclass
class QueryFeeSharesResponse:
    fee_shares: list[FeeShare] = field(default_factory=list)
    pagination: PageResponse = field(default_factory=PageResponse)


@dataclass
class QueryContractsResponse:
    contract_addresses: list[str] = field(default_factory=list)
    pagination: PageResponse = field(default_factory=PageResponse)


def paginate(
    store: _IterableStore,
    page_request: PageRequest | None,
    on_result: Callable[[bytes, bytes], None],
) -> PageResponse:
    """Call on_result for each entry of one page of store and describe the page."""
    request = page_request or PageRequest()
    key = request.key
    offset = request.offset
    limit = request.limit
    count_total = request.count_total

    if offset > 0 and key:
        raise ValueError("invalid request, either offset or key is expected, got both")
    if limit == 0:
        limit = DEFAULT_LIMIT
        count_total = True

    if key:
        count = 0
        for item_key, value in store.iterate():
            if item_key < key:
                continue
            if count == limit:
                return PageResponse(next_key=item_key)
            on_result(item_key, value)
            count += 1
        return PageResponse()

    end = offset + limit
    count = 0
    next_key: bytes | None = None
    for item_key, value in store.iterate():
        count += 1
        if count <= offset:
            continue
        if count <= end:
            on_result(item_key, value)
        elif count == end + 1:
            next_key = item_key
            if not count_total:
                break
    return PageResponse(next_key=next_key, total=count if count_total else 0)


def _invalid(kind: str, address: str) -> QueryError:
    return QueryError(
        StatusCode.INVALID_ARGUMENT,
        f"invalid format for {kind} {address}, should be bech32 ('{BECH32_PREFIX}...')",
    )


@dataclass
class Querier:
    """Answers queries against a keeper's state."""

    keeper: Keeper

    def _store(self, ctx: Context, prefix: bytes) -> PrefixStore:
        return PrefixStore(ctx.kv_store(self.keeper.store_key), prefix)

    def _paginate(
        self,
        store: PrefixStore,
        page_request: PageRequest | None,
        on_result: Callable[[bytes, bytes], None],
    ) -> PageResponse:
        try:
            return paginate(store, page_request, on_result)
        except (ValueError, TypeError, KeyError) as exc:
            raise QueryError(StatusCode.INTERNAL, str(exc)) from exc

    def fee_shares(
        self, ctx: Context, request: QueryFeeSharesRequest | None
    ) -> QueryFeeSharesResponse:
        """Every registered fee share, one page at a time."""
        if request is None:
            raise QueryError(StatusCode.INVALID_ARGUMENT, "empty request")
        found: list[FeeShare] = []

        def collect(_key: bytes, value: bytes) -> None:
            found.append(FeeShare.from_dict(json.loads(value)))

        page = self._paginate(self._store(ctx, KEY_PREFIX_FEE_SHARE), request.pagination, collect)
        return QueryFeeSharesResponse(fee_shares=found, pagination=page)

    def fee_share(self, ctx: Context, request: QueryFeeShareRequest | None) -> FeeShare:
        """The fee share of one contract."""
        if request is None:
            raise QueryError(StatusCode.INVALID_ARGUMENT, "empty request")
        try:
            contract = AccAddress.from_bech32(request.contract_address)
        except InvalidAddressError:
            raise _invalid("contract", request.contract_address) from None
        fee_share = self.keeper.get_fee_share(ctx, contract)
        if fee_share is None:
            raise QueryError(
                StatusCode.NOT_FOUND, f"fees registered contract '{request.contract_address}'"
            )
        return fee_share

    def params(self, ctx: Context, request: object = None) -> Params:
        return self.keeper.get_params(ctx)

    def _contracts(
        self, ctx: Context, prefix: bytes, page_request: PageRequest | None
    ) -> QueryContractsResponse:
        contracts: list[str] = []

        def collect(key: bytes, _value: bytes) -> None:
            contracts.append(str(AccAddress(key)))

        page = self._paginate(self._store(ctx, prefix), page_request, collect)
        return QueryContractsResponse(contract_addresses=contracts, pagination=page)

    def deployer_fee_shares(
        self, ctx: Context, request: QueryDeployerFeeSharesRequest | None
    ) -> QueryContractsResponse:
        """The contracts a deployer has registered."""
        if request is None:
            raise QueryError(StatusCode.INVALID_ARGUMENT, "empty request")
        try:
            deployer = AccAddress.from_bech32(request.deployer_address)
        except InvalidAddressError:
            raise _invalid("deployer", request.deployer_address) from None
        return self._contracts(ctx, key_prefix_deployer(deployer), request.pagination)

    def withdrawer_fee_shares(
        self, ctx: Context, request: QueryWithdrawerFeeSharesRequest | None
    ) -> QueryContractsResponse:
        """The contracts paying out to a withdrawer."""
        if request is None:
            raise QueryError(StatusCode.INVALID_ARGUMENT, "empty request")
        try:
            withdrawer = AccAddress.from_bech32(request.withdrawer_address)
        except InvalidAddressError:
            raise _invalid("withdraw addr", request.withdrawer_address) from None
        return self._contracts(ctx, key_prefix_withdrawer(withdrawer), request.pagination)