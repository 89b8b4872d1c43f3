# feeshare

This package is a fee-sharing module. A contract's admin, or its creator if it
has no admin, registers the contract together with a withdrawer address. When a
transaction calls registered contracts, the withdrawers receive a share of the
fee the transaction paid. The package has no dependencies beyond the standard
library.

## Modules

- `feeshare.address`: bech32 encoding (`bech32_encode`, `bech32_decode`) and
  `AccAddress`. This is a `bytes` subclass that prints in bech32 form. The
  default prefix is `cosmos`.
- `feeshare.coins`: `Coin`, `Coins` (kept sorted by denom, with zero amounts
  dropped), `dec_with_prec`, `round_half_even`, and `BankKeeper`. `BankKeeper`
  is an in-memory bank that holds account and module-account balances.
- `feeshare.params`: `Params`, `default_params()` and the validators
  `validate_bool`, `validate_shares` and `validate_array`. By default fee
  sharing is on, developers get 50 %, and every denom is allowed (the
  `allowed_denoms` list is empty).
- `feeshare.models`: the `FeeShare` record and `GenesisState`, each with
  `validate()`, `to_dict()` and `from_dict()`.
- `feeshare.msgs`: `MsgRegisterFeeShare`, `MsgUpdateFeeShare` and
  `MsgCancelFeeShare`, and the query requests `QueryFeeShareRequest`,
  `QueryDeployerFeeSharesRequest` and `QueryWithdrawerFeeSharesRequest`. Each
  has a stateless `validate_basic()`. The module also has
  `registered_message_types()` and `amino_name()`.
- `feeshare.keeper`: an in-memory `KVStore`, `PrefixStore`, `Context`, `Event`,
  `ContractInfo`, `WasmKeeper` (a table of known contracts) and `Keeper`.
  `Keeper` stores registrations, the deployer and withdrawer indexes, and the
  params.
- `feeshare.msg_server`: `MsgServer`, which registers, updates and cancels fee
  shares and emits events.
- `feeshare.query`: `Querier` and `paginate`, with offset and key based
  `PageRequest`s.
- `feeshare.ante`: `fee_pay_logic`, `fee_share_payout` and
  `FeeSharePayoutDecorator`, with the `Tx` and `MsgExecuteContract` types.
- `feeshare.module`: `init_genesis`, `export_genesis` and `AppModule`, which
  reads and writes the genesis state as JSON.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from feeshare.address import AccAddress
from feeshare.ante import MsgExecuteContract, fee_share_payout
from feeshare.coins import Coin, Coins
from feeshare.keeper import Context, ContractInfo, Keeper
from feeshare.msg_server import MsgServer
from feeshare.msgs import MsgRegisterFeeShare, QueryDeployerFeeSharesRequest
from feeshare.params import default_params
from feeshare.query import Querier

keeper = Keeper()
ctx = Context()
keeper.set_params(ctx, default_params())

creator = AccAddress(b"creator-account-01")
contract = AccAddress(b"contract-account-01")
withdrawer = AccAddress(b"withdrawer-acct-01")
keeper.wasm_keeper.contracts[bytes(contract)] = ContractInfo(code_id=1, creator=str(creator))

MsgServer(keeper).register_fee_share(
    ctx,
    MsgRegisterFeeShare(
        contract_address=str(contract),
        deployer_address=str(creator),
        withdrawer_address=str(withdrawer),
    ),
)

response = Querier(keeper).deployer_fee_shares(
    ctx, QueryDeployerFeeSharesRequest(deployer_address=str(creator))
)
print(response.contract_addresses)  # [str(contract)]

fee = Coins([Coin("ujuno", 1000)])
keeper.bank_keeper.modules["fee_collector"] = fee
fee_share_payout(ctx, keeper.bank_keeper, fee, keeper,
                 [MsgExecuteContract(sender=str(creator), contract=str(contract))])
print(keeper.bank_keeper.accounts[bytes(withdrawer)].amount_of("ujuno"))  # 500
```

A contract counts as created by a factory when its admin is itself a known
contract, or, if it has no admin, when its creator is. Such a contract may be
registered by anyone, but only with the contract itself as its withdrawer.

## Splitting fees

```python
from feeshare.ante import fee_pay_logic
from feeshare.coins import Coin, Coins, dec_with_prec

fees = Coins([Coin("ujuno", 500), Coin("utoken", 250)])
share = fee_pay_logic(fees, dec_with_prec(50, 2), 2)
print(share.amount_of("ujuno"))   # 125
print(share.amount_of("utoken"))  # 62
```

Each amount is multiplied by the developer share and divided by the number of
withdrawers to pay, using 18 decimal places. The result is rounded half to
even, and any denom that comes to zero is dropped. When `allowed_denoms` is not
empty, only those denoms are shared. Every withdrawer is paid the same split out
of the `fee_collector` module account.

## Errors

- Module and address failures raise subclasses of
  `feeshare.errors.FeeShareError`. Examples are `FeeShareDisabledError`,
  `FeeShareAlreadyRegisteredError`, `ContractNotRegisteredError`,
  `NoContractDeployedError`, `InvalidWithdrawerError`, `InvalidAddressError`,
  `UnauthorizedError`, `InsufficientFundsError` and `FeeSharePaymentError`.
  `InvalidAddressError` is also a `ValueError`.
- Params validation raises `TypeError` for a value of the wrong type and
  `ValueError` for a value out of range.
- `GenesisState.validate()` raises `ValueError` when a contract appears twice.
- Querier methods raise `QueryError`, which carries a `StatusCode`
  (`INVALID_ARGUMENT`, `NOT_FOUND` or `INTERNAL`).

## What it does not do

All state is held in memory in `KVStore`s owned by a `Context`, and nothing is
written to disk. The package has no command-line tool and no network or RPC
server. It does not run contracts: `WasmKeeper` is only a table of
`ContractInfo` records that the caller fills in.