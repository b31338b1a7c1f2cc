"""Maps the account store into renderable view state."""

from typing import List, Optional

from pydantic import BaseModel

from cally_accounts.linking.orchestrator import LinkOrchestrator
from cally_accounts.models.account import Account
from cally_accounts.providers.registry import get_provider, registered_providers
from cally_accounts.store.account_store import AccountStore
from cally_accounts.sync.sync_engine import SyncEngine


class ProviderBadge(BaseModel):
    glyph: str
    color: str


class AccountRow(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    connected: Optional[str] = None
    is_primary: bool = False
    color: str


class ProviderSection(BaseModel):
    provider: str
    title: str
    badge: ProviderBadge
    accounts: List[AccountRow]
    can_add: bool
    add_disabled: bool
    add_label: str


class IntegrationTile(BaseModel):
    provider: str
    label: str
    glyph: str
    caption: str
    disabled: bool


class SummaryCard(BaseModel):
    title: str
    value: int


class AccountManagerView(BaseModel):
    """Everything the account management screen displays."""

    loading: bool
    accounts_error: Optional[str] = None
    stats_error: Optional[str] = None
    summary: List[SummaryCard]
    sections: List[ProviderSection]
    tiles: List[IntegrationTile]

    @property
    def empty(self) -> bool:
        return not self.sections


def provider_badge(provider: str) -> ProviderBadge:
    """Get the glyph and accent color for a provider.

    Unknown providers get the default badge.
    """
    descriptor = get_provider(provider)
    return ProviderBadge(glyph=descriptor.glyph, color=descriptor.color)


def _account_row(account: Account) -> AccountRow:
    return AccountRow(
        id=account.id,
        name=account.display_name(),
        email=account.email,
        connected=account.connected_at.date().isoformat() if account.connected_at else None,
        is_primary=account.is_primary,
        color=provider_badge(account.provider).color,
    )


def build_view(store: AccountStore, orchestrator: LinkOrchestrator, sync: SyncEngine) -> AccountManagerView:
    """Build the view state for the current store contents.

    Args:
        store: Source of accounts and statistics.
        orchestrator: Source of the per-provider add state.
        sync: Source of the loading and failure flags.

    Returns:
        The view state.
    """
    accounts = store.accounts
    stats = store.stats

    summary = [
        SummaryCard(title="Total Accounts", value=stats.total_accounts),
        SummaryCard(title="Google Calendars", value=stats.count_for("google")),
        SummaryCard(title="Active Integrations", value=len(accounts)),
    ]

    sections = []
    for provider, provider_accounts in accounts.items():
        descriptor = get_provider(provider)
        can_add = descriptor.linkable
        sections.append(
            ProviderSection(
                provider=provider,
                title=f"{provider.capitalize()} Accounts ({len(provider_accounts)})",
                badge=provider_badge(provider),
                accounts=[_account_row(account) for account in provider_accounts],
                can_add=can_add,
                add_disabled=not orchestrator.can_request(provider),
                add_label="Adding..." if orchestrator.is_adding(provider) else "Add Account",
            )
        )

    tiles = []
    for descriptor in registered_providers():
        if not descriptor.linkable:
            caption = "Coming soon"
        elif orchestrator.is_adding(descriptor.tag):
            caption = "Connecting..."
        else:
            caption = descriptor.description
        tiles.append(
            IntegrationTile(
                provider=descriptor.tag,
                label=descriptor.label,
                glyph=descriptor.glyph,
                caption=caption,
                disabled=not orchestrator.can_request(descriptor.tag),
            )
        )

    return AccountManagerView(
        loading=sync.loading,
        accounts_error=sync.accounts_error,
        stats_error=sync.stats_error,
        summary=summary,
        sections=sections,
        tiles=tiles,
    )


def render_text(view: AccountManagerView) -> str:
    """Render the view as plain text for the terminal."""
    if view.loading:
        return "Loading accounts..."

    lines = []
    if view.accounts_error:
        lines.append(f"! Could not load accounts: {view.accounts_error}")
    if view.stats_error:
        lines.append(f"! Could not load statistics: {view.stats_error}")

    lines.append("  ".join(f"{card.title}: {card.value}" for card in view.summary))
    lines.append("-" * 80)

    if view.empty:
        lines.append("No accounts connected.")
        lines.append("Get started by connecting your first integration account.")
    for section in view.sections:
        lines.append(f"{section.badge.glyph} {section.title}")
        for row in section.accounts:
            star = " *" if row.is_primary else ""
            lines.append(f"  [{row.id}] {row.name}{star}")
            if row.email:
                lines.append(f"      {row.email}")
            if row.connected:
                lines.append(f"      Connected {row.connected}")
        lines.append("")

    lines.append("Add New Integration:")
    for tile in view.tiles:
        state = " (unavailable)" if tile.disabled else ""
        lines.append(f"  {tile.glyph} {tile.label} - {tile.caption}{state}")
    return "\n".join(lines)

