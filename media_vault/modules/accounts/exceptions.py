"""Errors raised by the account service."""


class AccountError(Exception):
    """Base class for account errors."""


class AccountAlreadyExistsError(AccountError):
    """The requested username is already registered."""


class AccountNotFoundError(AccountError):
    """No account exists with the given id."""
