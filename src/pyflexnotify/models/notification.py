"""Notification payload model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class NotificationPayload(BaseModel):
    """What a push or desktop transport needs to display an alert."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    icon: str
    url: str
