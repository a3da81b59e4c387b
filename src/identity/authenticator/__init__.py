"""Authenticator factory — get_authenticator() / set_authenticator().

FakeAuthenticator is the default; deployments install the adapter for their
identity provider with set_authenticator() at startup.
"""

from identity.authenticator.fake_adapter import FakeAuthenticator
from identity.authenticator.port import Authenticator

_current_authenticator: Authenticator | None = None


def get_authenticator() -> Authenticator:
    global _current_authenticator
    if _current_authenticator is None:
        _current_authenticator = FakeAuthenticator()
    return _current_authenticator


def set_authenticator(authenticator: Authenticator) -> None:
    global _current_authenticator
    _current_authenticator = authenticator


def reset_authenticator() -> None:
    global _current_authenticator
    _current_authenticator = None
