# bargainer/models/provider_config.py

"""Construction parameters for a deal provider."""

from dataclasses import dataclass, field


@dataclass
class ProviderConfig:
    """Name, endpoint and credentials a provider is built from."""

    name: str
    base_url: str
    label: str = ""
    api_key: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    enabled: bool = True

    @property
    def display_name(self) -> str:
        """Human-readable name, used as the store fallback."""
        return self.label or self.name
