"""Registry of provider capability descriptors."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from cally_accounts.utils.logging import get_logger

logger = get_logger(__name__)


class ProviderDescriptor(BaseModel):
    """What the client knows about one account provider.

    Adding a provider, or enabling linking for one, is a change to this data
    and not to the code that consumes it.
    """

    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    glyph: str = "🔗"
    color: str = "bg-gray-500"
    description: str = ""
    linkable: bool = False
    # Formatted with ``provider``; None when the provider cannot be linked.
    link_endpoint: Optional[str] = None

    def initiation_path(self) -> Optional[str]:
        """Get the API path that starts the link flow for this provider."""
        if not self.link_endpoint:
            return None
        return self.link_endpoint.format(provider=self.tag)


DEFAULT_DESCRIPTOR = ProviderDescriptor(tag="unknown", label="Other")

PROVIDER_REGISTRY: Dict[str, ProviderDescriptor] = {
    "google": ProviderDescriptor(
        tag="google",
        label="Google Calendar",
        glyph="📅",
        color="bg-blue-500",
        description="Connect your calendar",
        linkable=True,
        link_endpoint="/api/accounts/{provider}/add",
    ),
    "jira": ProviderDescriptor(
        tag="jira",
        label="Jira",
        glyph="📋",
        color="bg-blue-600",
        description="Connect your issues",
        link_endpoint="/api/jira/auth",
    ),
    "github": ProviderDescriptor(
        tag="github",
        label="GitHub",
        glyph="🐙",
        color="bg-gray-800",
        description="Connect your repositories",
    ),
}


def register_provider(descriptor: ProviderDescriptor) -> None:
    """Register or replace a provider descriptor.

    Args:
        descriptor: The descriptor to register under its tag.
    """
    PROVIDER_REGISTRY[descriptor.tag] = descriptor
    logger.info("Registered provider: {}", descriptor.tag)


def get_provider(tag: str) -> ProviderDescriptor:
    """Get the descriptor for a provider tag.

    Unknown tags resolve to a copy of the default descriptor carrying the
    requested tag, so a provider introduced by the server still renders.

    Args:
        tag: Provider tag as reported by the API.

    Returns:
        The registered descriptor or the default fallback.
    """
    descriptor = PROVIDER_REGISTRY.get(tag)
    if descriptor is None:
        logger.debug("Unknown provider {}, using default descriptor", tag)
        return DEFAULT_DESCRIPTOR.model_copy(update={"tag": tag, "label": tag.capitalize()})
    return descriptor


def is_linkable(tag: str) -> bool:
    """Check whether the link flow can be started for a provider."""
    descriptor = PROVIDER_REGISTRY.get(tag)
    return bool(descriptor and descriptor.linkable and descriptor.initiation_path())


def registered_providers() -> List[ProviderDescriptor]:
    """Get all registered descriptors in registration order."""
    return list(PROVIDER_REGISTRY.values())


def apply_overrides(overrides: Dict[str, Dict[str, Any]]) -> None:
    """Apply per-provider overrides from configuration.

    Existing descriptors are updated field by field; unknown tags create
    new descriptors.

    Args:
        overrides: Mapping of provider tag to descriptor fields.
    """
    for tag, fields in (overrides or {}).items():
        current = PROVIDER_REGISTRY.get(tag)
        if current is None:
            data = {"label": tag.capitalize(), **fields, "tag": tag}
            register_provider(ProviderDescriptor(**data))
        else:
            merged = {**current.model_dump(), **fields, "tag": tag}
            register_provider(ProviderDescriptor(**merged))
