"""Error types raised by the fee share module."""

from __future__ import annotations

from enum import IntEnum


class FeeShareError(Exception):
    """Base class of every error the module raises.

    An optional detail is placed in front of the registered description,
    separated by a colon.
    """

    codespace = "feeshare"
    code = 0
    description = "feeshare error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = f"{detail}: {self.description}" if detail else self.description
        super().__init__(message)


class FeeShareDisabledError(FeeShareError):
    code = 1
    description = "feeshare module is disabled by governance"


class FeeShareAlreadyRegisteredError(FeeShareError):
    code = 2
    description = "feeshare already exists for given contract"


class NoContractDeployedError(FeeShareError):
    code = 3
    description = "no contract deployed"


class ContractNotRegisteredError(FeeShareError):
    code = 4
    description = "no feeshare registered for contract"


class FeeSharePaymentError(FeeShareError):
    code = 5
    description = "feeshare payment error"


class InvalidWithdrawerError(FeeShareError):
    code = 6
    description = "invalid withdrawer address"


class TxDecodeError(FeeShareError):
    codespace = "sdk"
    code = 2
    description = "tx parse error"


class UnauthorizedError(FeeShareError):
    codespace = "sdk"
    code = 4
    description = "unauthorized"


class InsufficientFundsError(FeeShareError):
    codespace = "sdk"
    code = 5
    description = "insufficient funds"


class InvalidAddressError(FeeShareError, ValueError):
    codespace = "sdk"
    code = 7
    description = "invalid address"


class StatusCode(IntEnum):
    """Status codes carried by query errors."""

    OK = 0
    INVALID_ARGUMENT = 3
    NOT_FOUND = 5
    INTERNAL = 13


class QueryError(Exception):
    """A failed query, tagged with a status code."""

    def __init__(self, code: StatusCode, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code.name}: {message}")