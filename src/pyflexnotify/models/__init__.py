"""Typed models for pyflexnotify."""

from pyflexnotify.models.events import CandidateEvent, DisplaySet, MatchEvent, StatusUpdate
from pyflexnotify.models.notification import NotificationPayload
from pyflexnotify.models.route import WalkingRoute
from pyflexnotify.models.vehicle import RankedVehicle, Vehicle

__all__ = [
    "CandidateEvent",
    "DisplaySet",
    "MatchEvent",
    "NotificationPayload",
    "RankedVehicle",
    "StatusUpdate",
    "Vehicle",
    "WalkingRoute",
]
