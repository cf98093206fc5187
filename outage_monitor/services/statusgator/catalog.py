"""Monitored services and the aliases callers may use for them.

``MONITORED_SERVICES`` is the only place aliases are written down: the alias
lookup used by the client and the enum advertised in tool schemas are both
derived from it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MonitoredService:
    key: str  # name used in the default "check all" list
    canonical_id: str  # StatusGator service id
    display_name: str
    aliases: tuple[str, ...] = ()


MONITORED_SERVICES: tuple[MonitoredService, ...] = (
    MonitoredService("att", "att", "AT&T"),
    MonitoredService("verizon", "verizon", "Verizon"),
    MonitoredService("t-mobile", "t-mobile", "T-Mobile", aliases=("tmobile",)),
    MonitoredService("aws", "amazon-web-services", "AWS", aliases=("amazon-web-services",)),
    MonitoredService("google-cloud", "google-cloud", "Google Cloud", aliases=("gcp",)),
    MonitoredService("azure", "microsoft-azure", "Azure", aliases=("microsoft-azure",)),
)

DEFAULT_MONITORED = tuple(s.key for s in MONITORED_SERVICES)

SERVICE_ALIASES: dict[str, str] = {
    name: s.canonical_id
    for s in MONITORED_SERVICES
    for name in (s.key, *s.aliases)
}

# Short names accepted by check_outage (the long-form ids resolve through the
# alias map as well, they are just not advertised)
SERVICE_ENUM: list[str] = [
    name
    for s in MONITORED_SERVICES
    for name in (s.key, *s.aliases)
    if name == s.key or name != s.canonical_id
]

DISPLAY_NAMES = ", ".join(s.display_name for s in MONITORED_SERVICES)


def normalize_service_name(name: str) -> str:
    """Trim, lowercase and map a caller-supplied name to its canonical id.

    Names not in the alias table pass through (normalized) unchanged.
    """
    normalized = name.strip().lower()
    return SERVICE_ALIASES.get(normalized, normalized)
