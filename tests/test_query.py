from decimal import Decimal

import pytest

from feeshare.address import AccAddress
from feeshare.errors import QueryError, StatusCode
from feeshare.keeper import Context, KVStore, Keeper
from feeshare.models import FeeShare, new_fee_share
from feeshare.msgs import (
    QueryDeployerFeeSharesRequest,
    QueryFeeShareRequest,
    QueryWithdrawerFeeSharesRequest,
)
from feeshare.params import default_params
from feeshare.query import PageRequest, QueryFeeSharesRequest, Querier, paginate

SENDER = AccAddress(bytes([1]) * 20)
WITHDRAWER = AccAddress(bytes([3]) * 20)
CONTRACTS = [AccAddress(bytes([0xC0]) + n.to_bytes(31, "big")) for n in range(1, 6)]
CONTRACT_STRS = [str(c) for c in CONTRACTS]


@pytest.fixture
def env():
    keeper = Keeper()
    ctx = Context()
    keeper.set_params(ctx, default_params())
    for contract in CONTRACTS:
        keeper.set_fee_share(ctx, new_fee_share(contract, SENDER, WITHDRAWER))
        keeper.set_deployer_map(ctx, SENDER, contract)
        keeper.set_withdrawer_map(ctx, WITHDRAWER, contract)
    expected = [FeeShare(c, str(SENDER), str(WITHDRAWER)) for c in CONTRACT_STRS]
    return Querier(keeper), ctx, expected


def test_paginate_by_offset_pins_page():
    store = KVStore()
    for key in (b"a", b"b", b"c", b"d", b"e"):
        store.set(key, key.upper())
    seen = []
    page = paginate(store, PageRequest(offset=1, limit=2, count_total=True), lambda k, v: seen.append(v))
    assert seen == [b"B", b"C"]
    assert page.next_key == b"d"
    assert page.total == 5


def test_paginate_by_key_and_default_limit():
    store = KVStore()
    for key in (b"a", b"b", b"c"):
        store.set(key, b"1")
    seen = []
    page = paginate(store, PageRequest(key=b"b", limit=1), lambda k, v: seen.append(k))
    assert seen == [b"b"]
    assert page.next_key == b"c"

    seen.clear()
    page = paginate(store, None, lambda k, v: seen.append(k))
    assert seen == [b"a", b"b", b"c"]
    assert page.total == 3
    assert page.next_key is None


def test_paginate_rejects_offset_and_key():
    with pytest.raises(ValueError):
        paginate(KVStore(), PageRequest(key=b"a", offset=1), lambda k, v: None)


def test_fee_shares_by_offset(env):
    querier, ctx, expected = env
    collected = []
    for offset in range(0, len(CONTRACTS), 2):
        resp = querier.fee_shares(ctx, QueryFeeSharesRequest(PageRequest(offset=offset, limit=2)))
        assert len(resp.fee_shares) <= 2
        assert all(fs in expected for fs in resp.fee_shares)
        collected.extend(resp.fee_shares)
    assert sorted(collected, key=lambda f: f.contract_address) == sorted(
        expected, key=lambda f: f.contract_address
    )


def test_fee_shares_by_key(env):
    querier, ctx, expected = env
    next_key = None
    collected = []
    for _ in range(0, len(CONTRACTS), 2):
        resp = querier.fee_shares(ctx, QueryFeeSharesRequest(PageRequest(key=next_key, limit=2)))
        assert len(resp.fee_shares) <= 2
        assert all(fs in expected for fs in resp.fee_shares)
        collected.extend(resp.fee_shares)
        next_key = resp.pagination.next_key
    assert len(collected) == len(expected)
    assert next_key is None


def test_fee_shares_total(env):
    querier, ctx, expected = env
    resp = querier.fee_shares(ctx, QueryFeeSharesRequest(PageRequest(count_total=True)))
    assert resp.pagination.total == len(expected)
    assert sorted(resp.fee_shares, key=lambda f: f.contract_address) == sorted(
        expected, key=lambda f: f.contract_address
    )


def test_fee_shares_empty_request(env):
    querier, ctx, _ = env
    with pytest.raises(QueryError) as info:
        querier.fee_shares(ctx, None)
    assert info.value.code is StatusCode.INVALID_ARGUMENT


def test_fee_share_found(env):
    querier, ctx, _ = env
    result = querier.fee_share(ctx, QueryFeeShareRequest(CONTRACT_STRS[0]))
    assert result == FeeShare(CONTRACT_STRS[0], str(SENDER), str(WITHDRAWER))


def test_fee_share_errors(env):
    querier, ctx, _ = env
    with pytest.raises(QueryError) as info:
        querier.fee_share(ctx, QueryFeeShareRequest("Invalid"))
    assert info.value.code is StatusCode.INVALID_ARGUMENT

    unknown = str(AccAddress(bytes([0xEE]) * 32))
    with pytest.raises(QueryError) as info:
        querier.fee_share(ctx, QueryFeeShareRequest(unknown))
    assert info.value.code is StatusCode.NOT_FOUND


def test_params(env):
    querier, ctx, _ = env
    params = querier.params(ctx, None)
    assert params.enable_fee_share is True
    assert params.developer_shares == Decimal("0.5")
    assert params.allowed_denoms == []


def test_deployer_fee_shares(env):
    querier, ctx, _ = env
    collected = []
    for offset in range(0, len(CONTRACTS), 2):
        resp = querier.deployer_fee_shares(
            ctx, QueryDeployerFeeSharesRequest(str(SENDER), PageRequest(offset=offset, limit=2))
        )
        assert len(resp.contract_addresses) <= 2
        assert set(resp.contract_addresses) <= set(CONTRACT_STRS)
        collected.extend(resp.contract_addresses)
    assert sorted(collected) == sorted(CONTRACT_STRS)

    resp = querier.deployer_fee_shares(
        ctx, QueryDeployerFeeSharesRequest(str(SENDER), PageRequest(count_total=True))
    )
    assert resp.pagination.total == len(CONTRACTS)
    assert sorted(resp.contract_addresses) == sorted(CONTRACT_STRS)


def test_withdrawer_fee_shares_by_key(env):
    querier, ctx, _ = env
    next_key = None
    collected = []
    for _ in range(0, len(CONTRACTS), 2):
        resp = querier.withdrawer_fee_shares(
            ctx,
            QueryWithdrawerFeeSharesRequest(str(WITHDRAWER), PageRequest(key=next_key, limit=2)),
        )
        assert len(resp.contract_addresses) <= 2
        collected.extend(resp.contract_addresses)
        next_key = resp.pagination.next_key
    assert sorted(collected) == sorted(CONTRACT_STRS)


def test_withdrawer_fee_shares_total_and_unknown(env):
    querier, ctx, _ = env
    resp = querier.withdrawer_fee_shares(
        ctx, QueryWithdrawerFeeSharesRequest(str(WITHDRAWER), PageRequest(count_total=True))
    )
    assert resp.pagination.total == len(CONTRACTS)

    resp = querier.withdrawer_fee_shares(ctx, QueryWithdrawerFeeSharesRequest(str(SENDER)))
    assert resp.contract_addresses == []


def test_contract_queries_reject_invalid_address(env):
    querier, ctx, _ = env
    with pytest.raises(QueryError) as info:
        querier.deployer_fee_shares(ctx, QueryDeployerFeeSharesRequest("Invalid"))
    assert info.value.code is StatusCode.INVALID_ARGUMENT
    with pytest.raises(QueryError) as info:
        querier.withdrawer_fee_shares(ctx, None)
    assert info.value.code is StatusCode.INVALID_ARGUMENT


def test_internal_error_on_bad_page_request(env):
    querier, ctx, _ = env
    with pytest.raises(QueryError) as info:
        querier.fee_shares(ctx, QueryFeeSharesRequest(PageRequest(key=b"\x01", offset=2)))
    assert info.value.code is StatusCode.INTERNAL