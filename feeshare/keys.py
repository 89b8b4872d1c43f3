"""Module name, store key prefixes and event names."""

from __future__ import annotations

MODULE_NAME = "feeshare"
STORE_KEY = MODULE_NAME
ROUTER_KEY = MODULE_NAME

KEY_PREFIX_FEE_SHARE = bytes([1])
KEY_PREFIX_DEPLOYER = bytes([2])
KEY_PREFIX_WITHDRAWER = bytes([3])

EVENT_TYPE_REGISTER_FEE_SHARE = "register_feeshare"
EVENT_TYPE_CANCEL_FEE_SHARE = "cancel_feeshare"
EVENT_TYPE_UPDATE_FEE_SHARE = "update_feeshare"

ATTRIBUTE_KEY_CONTRACT = "contract"
ATTRIBUTE_KEY_WITHDRAWER_ADDRESS = "withdrawer_address"
ATTRIBUTE_KEY_SENDER = "sender"


def key_prefix_deployer(deployer: bytes) -> bytes:
    """Store prefix for the contracts registered by a deployer."""
    return KEY_PREFIX_DEPLOYER + bytes(deployer)


def key_prefix_withdrawer(withdrawer: bytes) -> bytes:
    """Store prefix for the contracts paying out to a withdrawer."""
    return KEY_PREFIX_WITHDRAWER + bytes(withdrawer)