"""
Subscriber list management.

Provides:
- Subscribe / unsubscribe / pause / activate
- Listing and fetching subscribers
- Partial subscriber updates
"""

from datetime import datetime, timezone
from typing import Optional

from .base_client import BluefoxModule
from .errors import BluefoxError
from .models import Result, SubscriberStatus

SUBSCRIBER_LISTS_PATH = "subscriber-lists"


def to_iso_utc(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds, e.g. 2025-01-01T00:00:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class BluefoxSubscriber(BluefoxModule):
    """Operations on subscriber lists.

    Status changes are decided by the server; the returned subscriber
    reflects its new status.

    API docs: https://bluefox.email/docs/api/subscriber-list-management
    """

    def _list_path(self, subscriber_list_id: str, email: Optional[str] = None) -> str:
        if email is None:
            return f"{SUBSCRIBER_LISTS_PATH}/{subscriber_list_id}"
        return f"{SUBSCRIBER_LISTS_PATH}/{subscriber_list_id}/{email}"

    def add(self, subscriber_list_id: str, name: str, email: str) -> Result:
        """Subscribe a new member to a subscriber list.

        Args:
            subscriber_list_id: ID of the subscriber list
            name: Subscriber name
            email: Subscriber email address

        Returns:
            Result with the created subscriber in ``value.data``

        Raises:
            BluefoxError: If validation fails

        Example:
            result = client.subscriber.add("list-123", "John Doe", "john@example.com")
            if result.ok:
                print(result.value.data['status'])
        """
        self.log_debug("SubscriberAdd.Input", {'subscriberListId': subscriber_list_id, 'name': name, 'email': email})
        self.validate_required_fields({'subscriberListId': subscriber_list_id, 'name': name, 'email': email})
        self.validate_email(email)

        result = self.request(
            self._list_path(subscriber_list_id),
            'POST',
            body={'name': name, 'email': email},
        )

        self.log_debug("SubscriberAdd.Result", result)
        return result

    def remove(self, subscriber_list_id: str, email: str) -> Result:
        """Unsubscribe a member from a subscriber list.

        Raises:
            BluefoxError: If validation fails
        """
        self.log_debug("SubscriberRemove.Input", {'subscriberListId': subscriber_list_id, 'email': email})
        self.validate_required_fields({'subscriberListId': subscriber_list_id, 'email': email})
        self.validate_email(email)

        result = self.request(
            self._list_path(subscriber_list_id, email),
            'PATCH',
            body={'status': SubscriberStatus.UNSUBSCRIBED.value},
        )

        self.log_debug("SubscriberRemove.Result", result)
        return result

    def pause(self, subscriber_list_id: str, email: str, until: datetime) -> Result:
        """Pause a member's subscription until the given date.

        Args:
            subscriber_list_id: ID of the subscriber list
            email: Subscriber email address
            until: Date the pause ends; must be in the future. Naive
                datetimes are treated as UTC.

        Raises:
            BluefoxError: If validation fails
        """
        self.log_debug("SubscriberPause.Input", {
            'subscriberListId': subscriber_list_id, 'email': email, 'date': until,
        })
        self.validate_required_fields({'subscriberListId': subscriber_list_id, 'email': email})
        self.validate_email(email)
        self._validate_date(until)

        result = self.request(
            self._list_path(subscriber_list_id, email),
            'PATCH',
            body={
                'status': SubscriberStatus.PAUSED.value,
                'pausedUntil': to_iso_utc(until),
            },
        )

        self.log_debug("SubscriberPause.Result", result)
        return result

    def activate(self, subscriber_list_id: str, email: str) -> Result:
        """Re-activate a paused or unsubscribed member.

        Raises:
            BluefoxError: If validation fails
        """
        self.log_debug("SubscriberActivate.Input", {'subscriberListId': subscriber_list_id, 'email': email})
        self.validate_required_fields({'subscriberListId': subscriber_list_id, 'email': email})
        self.validate_email(email)

        result = self.request(
            self._list_path(subscriber_list_id, email),
            'PATCH',
            body={'status': SubscriberStatus.ACTIVE.value},
        )

        self.log_debug("SubscriberActivate.Result", result)
        return result

    def list(self, subscriber_list_id: str) -> Result:
        """List the members of a subscriber list.

        Returns:
            Result with ``{"items": [...], "count": n}`` in ``value.data``
        """
        self.log_debug("SubscriberList.Input", {'subscriberListId': subscriber_list_id})
        self.validate_required_fields({'subscriberListId': subscriber_list_id})

        result = self.request(self._list_path(subscriber_list_id), 'GET')

        self.log_debug("SubscriberList.Result", result)
        return result

    def get_one(self, subscriber_list_id: str, email: str) -> Result:
        """Fetch a single member of a subscriber list."""
        self.log_debug("SubscriberGetOne.Input", {'subscriberListId': subscriber_list_id, 'email': email})
        self.validate_required_fields({'subscriberListId': subscriber_list_id, 'email': email})

        result = self.request(self._list_path(subscriber_list_id, email), 'GET')

        self.log_debug("SubscriberGetOne.Result", result)
        return result

    def update_one(self,
                   subscriber_list_id: str,
                   email: str,
                   new_email: Optional[str] = None,
                   new_name: Optional[str] = None) -> Result:
        """Update a member's email and/or name.

        Only the fields that are given are sent.

        Args:
            subscriber_list_id: ID of the subscriber list
            email: Current email address of the subscriber
            new_email: New email address
            new_name: New name

        Raises:
            BluefoxError: If validation fails
        """
        self.log_debug("SubscriberUpdateOne.Input", {
            'subscriberListId': subscriber_list_id,
            'email': email,
            'newEmail': new_email,
            'newName': new_name,
        })
        self.validate_required_fields({'subscriberListId': subscriber_list_id, 'email': email})

        body = {}
        if new_email:
            self.validate_email(new_email)
            body['email'] = new_email
        if new_name:
            body['name'] = new_name

        result = self.request(self._list_path(subscriber_list_id, email), 'PATCH', body=body)

        self.log_debug("SubscriberUpdateOne.Result", result)
        return result

    def _validate_date(self, value: datetime):
        self.log_debug("SubscriberValidation.Date", {'date': value})

        if not isinstance(value, datetime):
            error = BluefoxError.validation("Invalid date format")
            self.log_error("SubscriberValidation.Date", error)
            raise error

        aware = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        if aware < datetime.now(timezone.utc):
            error = BluefoxError.validation("Pause date must be in the future")
            self.log_error("SubscriberValidation.Date", error)
            raise error
