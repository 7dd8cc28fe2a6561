"""Push message models.

Defines the payload sent to every recipient of a send call: delivery options,
the string-valued data map, and the optional display notification.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class MessagePriority(StrEnum):
    """Delivery priority understood by the service."""

    NORMAL = "normal"
    HIGH = "high"


class Notification(BaseModel):
    """Display notification shown by the device on the app's behalf.

    Example:
        notification = Notification(
            title="Order shipped",
            body="Your order #4815 is on its way",
            badge=1,
        )
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = Field(default=None, description="Notification title")
    body: str | None = Field(default=None, description="Notification body text")
    icon: str | None = Field(default=None, description="Drawable resource name")
    sound: str | None = Field(default=None, description="Sound to play on arrival")
    badge: int | None = Field(default=None, ge=0, description="App icon badge count")
    tag: str | None = Field(
        default=None,
        description="Notifications with the same tag replace each other",
    )
    color: str | None = Field(default=None, description="Icon color as #rrggbb")
    click_action: str | None = Field(default=None, description="Action on user click")
    body_loc_key: str | None = Field(default=None, description="Localized body key")
    body_loc_args: list[str] | None = Field(
        default=None,
        description="Format arguments for the localized body",
    )
    title_loc_key: str | None = Field(default=None, description="Localized title key")
    title_loc_args: list[str] | None = Field(
        default=None,
        description="Format arguments for the localized title",
    )


class Message(BaseModel):
    """A push message, independent of who receives it.

    Example:
        message = Message(
            collapse_key="sync",
            time_to_live=3600,
            data={"kind": "sync", "since": "1700000000"},
        )
    """

    model_config = ConfigDict(frozen=True)

    collapse_key: str | None = Field(
        default=None,
        description="Collapse pending messages with the same key into one",
    )
    delay_while_idle: bool | None = Field(
        default=None,
        description="Hold the message until the device becomes active",
    )
    time_to_live: int | None = Field(
        default=None,
        ge=0,
        le=2_419_200,
        description="Seconds the service keeps the message if the device is offline",
    )
    dry_run: bool | None = Field(
        default=None,
        description="Validate the request without delivering it",
    )
    restricted_package_name: str | None = Field(
        default=None,
        description="Only deliver to registrations of this package",
    )
    priority: MessagePriority | None = Field(default=None, description="Delivery priority")
    content_available: bool | None = Field(
        default=None,
        description="Wake an inactive client app (iOS)",
    )
    data: dict[str, str] = Field(
        default_factory=dict,
        description="Key/value payload delivered to the app",
    )
    notification: Notification | None = Field(
        default=None,
        description="Optional display notification",
    )

    def with_data(self, **entries: str) -> Message:
        """Return a copy with additional data entries."""
        return self.model_copy(update={"data": {**self.data, **entries}})


__all__ = [
    "Message",
    "MessagePriority",
    "Notification",
]
