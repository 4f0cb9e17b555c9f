"""Management realm credentials for asdeploy (HTTP digest only)."""

from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass(slots=True, frozen=True)
class ManagementCredentials:
    """
    Credentials for the server's management realm.

    The HTTP management interface authenticates with digest auth against
    the ``ManagementRealm`` by default.
    """

    username: str
    password: str

    def __post_init__(self) -> None:
        if not isinstance(self.username, str) or not self.username.strip():
            raise ValueError("ManagementCredentials.username must be a non-empty string")
        if not isinstance(self.password, str):
            raise TypeError("ManagementCredentials.password must be a string")

    def to_httpx_auth(self) -> httpx.DigestAuth:
        """Return an httpx auth flow for these credentials."""
        return httpx.DigestAuth(self.username, self.password)

    def __repr__(self) -> str:
        return f"ManagementCredentials(username={self.username!r}, password='***')"
