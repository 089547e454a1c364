"""Resource-specific convenience wrappers."""
from .audit_events import AuditEventsResource
from .customers import CustomersResource
from .downloads import DownloadsResource
from .entitlements import EntitlementsResource
from .health import HealthResource
from .keys import ApiKeysResource
from .releases import ReleasesResource
from .users import UsersResource

__all__ = [
    "HealthResource",
    "CustomersResource",
    "UsersResource",
    "EntitlementsResource",
    "AuditEventsResource",
    "ApiKeysResource",
    "DownloadsResource",
    "ReleasesResource",
]
