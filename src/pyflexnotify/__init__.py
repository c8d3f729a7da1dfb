"""pyflexnotify - Async proximity alerts for shared-vehicle availability."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyflexnotify")
except PackageNotFoundError:
    __version__ = "0+local"

from pyflexnotify.cities import booking_url, branch_id_for, detect_city
from pyflexnotify.client import FlexClient
from pyflexnotify.config import FlexConfig
from pyflexnotify.exceptions import (
    FlexConfigError,
    FlexNotifyError,
    FlexValidationError,
    PushDeliveryError,
    PushSubscriptionGoneError,
    UpstreamError,
)
from pyflexnotify.geo import distance_metres, format_distance, to_radians
from pyflexnotify.models import (
    CandidateEvent,
    DisplaySet,
    MatchEvent,
    NotificationPayload,
    RankedVehicle,
    StatusUpdate,
    Vehicle,
    WalkingRoute,
)
from pyflexnotify.notifications import PushSender, WebPushSender, build_match_notification
from pyflexnotify.ranking import rank
from pyflexnotify.registry import Subscription, SubscriptionRegistry
from pyflexnotify.search import (
    RadiusLadderPolicy,
    SearchLoop,
    SearchSession,
    SearchState,
    SingleShotPolicy,
    StopReason,
)

__all__ = [
    "__version__",
    "CandidateEvent",
    "DisplaySet",
    "FlexClient",
    "FlexConfig",
    "FlexConfigError",
    "FlexNotifyError",
    "FlexValidationError",
    "MatchEvent",
    "NotificationPayload",
    "PushDeliveryError",
    "PushSender",
    "PushSubscriptionGoneError",
    "RadiusLadderPolicy",
    "RankedVehicle",
    "SearchLoop",
    "SearchSession",
    "SearchState",
    "SingleShotPolicy",
    "StatusUpdate",
    "StopReason",
    "Subscription",
    "SubscriptionRegistry",
    "UpstreamError",
    "Vehicle",
    "WalkingRoute",
    "WebPushSender",
    "booking_url",
    "branch_id_for",
    "detect_city",
    "distance_metres",
    "format_distance",
    "rank",
    "to_radians",
]
