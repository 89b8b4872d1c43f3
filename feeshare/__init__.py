"""Fee sharing for contract developers: addresses, coins, params, registrations, queries, payouts and genesis."""

__version__ = "0.1.0"