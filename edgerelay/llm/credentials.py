"""Credential resolution over a resolved `RelayConfig`.

Resolution is a pure lookup: no environment access, no caching, no network.
Absence is reported through `MissingCredential`, which the relay converts into a
descriptive completion text instead of an HTTP error.
"""

from dataclasses import dataclass

from edgerelay.llm.provider_config import ACCOUNT_ID_KEY, API_TOKEN_KEY, RelayConfig


@dataclass(frozen=True)
class Credentials:
    """Upstream credentials scoped to a single request."""

    account_id: str
    api_token: str

    def __repr__(self) -> str:
        return f"Credentials(account_id={self.account_id!r}, api_token='***')"


class MissingCredential(Exception):
    """A required credential key is not configured."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return f"Error: {self.key} environment variable not set"


def resolve_credentials(config: RelayConfig) -> Credentials:
    """Return credentials from `config` or raise for the first absent key.

    The account identifier is checked before the API token.

    Raises:
        MissingCredential: When `account_id` or `api_token` is unset.
    """
    if not config.account_id:
        raise MissingCredential(ACCOUNT_ID_KEY)
    if not config.api_token:
        raise MissingCredential(API_TOKEN_KEY)
    return Credentials(account_id=config.account_id, api_token=config.api_token)
