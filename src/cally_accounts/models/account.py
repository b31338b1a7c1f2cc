"""Linked account data models."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def default_account_name(provider: str) -> str:
    """Return the label used when an account is linked without a name."""
    return f"{provider} Account"


class Account(BaseModel):
    """A third-party account linked to the current user."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str
    provider: str
    name: str = ""
    email: Optional[str] = None
    is_primary: bool = Field(default=False, alias="isPrimary")
    connected_at: Optional[datetime] = Field(default=None, alias="connectedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Servers backed by integer keys report numeric ids.
        if isinstance(value, int):
            return str(value)
        return value

    def display_name(self) -> str:
        """Get the name shown for this account.

        Returns:
            The user-chosen name without surrounding whitespace, or the
            provider default when it is blank.
        """
        return (self.name or "").strip() or default_account_name(self.provider)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the account to its wire representation.

        Returns:
            Dictionary using the API's camelCase field names.
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ProviderStats(BaseModel):
    """Per-provider entry of the aggregate statistics."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    count: int = 0
    accounts: List[Account] = Field(default_factory=list)


class AccountStats(BaseModel):
    """Server-computed summary over all linked accounts."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_accounts: int = Field(default=0, alias="totalAccounts")
    by_provider: Dict[str, ProviderStats] = Field(default_factory=dict, alias="byProvider")

    @field_validator("by_provider", mode="before")
    @classmethod
    def _tag_accounts(cls, value: Any) -> Any:
        # Summary entries omit the provider; it is the key they sit under.
        if not isinstance(value, dict):
            return value
        tagged = {}
        for provider, entry in value.items():
            if isinstance(entry, dict) and isinstance(entry.get("accounts"), list):
                entry = {
                    **entry,
                    "accounts": [
                        {"provider": provider, **raw} if isinstance(raw, dict) else raw
                        for raw in entry["accounts"]
                    ],
                }
            tagged[provider] = entry
        return tagged

    def count_for(self, provider: str) -> int:
        """Get the number of accounts the server reports for a provider."""
        entry = self.by_provider.get(provider)
        return entry.count if entry else 0

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# provider -> accounts in server order
AccountSnapshot = Dict[str, List[Account]]


def parse_snapshot(payload: Dict[str, Any]) -> AccountSnapshot:
    """Build an account snapshot from the ``accounts`` object of the API.

    Providers reported with an empty list are dropped so that keys exist
    only for providers with at least one account. Order is preserved.

    Args:
        payload: Mapping of provider tag to a list of raw account objects.

    Returns:
        The parsed snapshot.
    """
    snapshot: AccountSnapshot = {}
    for provider, raw_accounts in payload.items():
        accounts = [
            Account.model_validate({"provider": provider, **raw})
            for raw in raw_accounts or []
        ]
        if accounts:
            snapshot[provider] = accounts
    return snapshot


def snapshot_to_dict(snapshot: AccountSnapshot) -> Dict[str, List[Dict[str, Any]]]:
    """Convert a snapshot back to plain data for JSON or YAML output."""
    return {
        provider: [account.to_dict() for account in accounts]
        for provider, accounts in snapshot.items()
    }
