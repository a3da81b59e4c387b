"""In-memory authenticator for development and testing."""

from identity.authenticator.port import Authenticator
from identity.principal import Principal


class FakeAuthenticator(Authenticator):
    """Maps pre-registered tokens to principals."""

    def __init__(self) -> None:
        self.tokens: dict[str, Principal] = {}

    def register(self, token: str, principal: Principal) -> None:
        self.tokens[token] = principal

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def authenticate(self, token: str) -> Principal | None:
        return self.tokens.get(token)

    def reset(self) -> None:
        self.tokens.clear()
