"""Unit tests for request body building and message models."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from push_service.infra.push.exceptions import PushUsageError
from push_service.infra.push.payload import build_request_body
from push_service.infra.push.schemas import Message, MessagePriority, Notification


@pytest.mark.unit
class TestBuildRequestBody:
    """Test suite for build_request_body."""

    def test_single_target(self, message):
        body = build_request_body(message, to="/topics/group")

        assert body == {
            "to": "/topics/group",
            "collapse_key": "sync",
            "time_to_live": 108,
            "delay_while_idle": True,
            "data": {"k1": "v1", "k2": "v2"},
        }

    def test_registration_ids_keep_order(self, message):
        body = build_request_body(message, registration_ids=("4", "8", "15"))
        assert body["registration_ids"] == ["4", "8", "15"]
        assert "to" not in body

    def test_all_options(self):
        """Test that every option is copied under its wire name."""
        message = Message(
            collapse_key="ck",
            delay_while_idle=False,
            time_to_live=0,
            dry_run=True,
            restricted_package_name="com.example.app",
            priority=MessagePriority.HIGH,
            content_available=True,
        )
        body = build_request_body(message, to="token")

        assert body["delay_while_idle"] is False
        assert body["time_to_live"] == 0
        assert body["dry_run"] is True
        assert body["restricted_package_name"] == "com.example.app"
        assert body["priority"] == "high"
        assert body["content_available"] is True

    def test_unset_options_and_empty_data_omitted(self):
        body = build_request_body(Message(), to="token")
        assert body == {"to": "token"}

    def test_notification(self):
        """Test that unset notification fields are dropped and badge is a string."""
        message = Message(
            notification=Notification(
                title="Shipped",
                body="On its way",
                badge=3,
                body_loc_args=["a", "b"],
            )
        )
        body = build_request_body(message, to="token")

        assert body["notification"] == {
            "title": "Shipped",
            "body": "On its way",
            "badge": "3",
            "body_loc_args": ["a", "b"],
        }

    @pytest.mark.parametrize(
        "targets",
        [{}, {"to": "token", "registration_ids": ["a"]}],
    )
    def test_requires_exactly_one_target(self, message, targets):
        with pytest.raises(PushUsageError):
            build_request_body(message, **targets)


@pytest.mark.unit
class TestMessage:
    """Test suite for the message models."""

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValidationError):
            Message(time_to_live=-1)

    def test_data_values_must_be_strings(self):
        with pytest.raises(ValidationError):
            Message(data={"k": object()})

    def test_with_data_returns_copy(self, message):
        updated = message.with_data(k3="v3")
        assert updated.data == {"k1": "v1", "k2": "v2", "k3": "v3"}
        assert "k3" not in message.data
        assert updated.collapse_key == message.collapse_key
