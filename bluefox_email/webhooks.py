"""
Webhook handling for Bluefox events.

Provides:
- Bearer token validation of inbound webhook requests (with key rotation)
- Parsing of webhook payloads into WebhookEvent objects
- Dispatch of events to handlers keyed by WebhookEventType
- Event type guards
- Sending synthetic test events to a webhook URL
"""

import hmac
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from .base_client import BluefoxModule
from .errors import BluefoxError
from .models import (
    EMAIL_EVENT_TYPES,
    SUBSCRIPTION_EVENT_TYPES,
    Result,
    WebhookEvent,
    WebhookEventType,
)

logger = logging.getLogger(__name__)

WebhookHandler = Callable[[WebhookEvent], Any]
WebhookHandlers = Mapping[WebhookEventType, WebhookHandler]


class _Headers:
    """Case-insensitive read-only header lookup."""

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        self._headers = {str(key).lower(): value for key, value in (headers or {}).items()}

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._headers.get(name.lower(), default)


def _keys_match(received: str, expected: str) -> bool:
    return hmac.compare_digest(received.encode('utf-8'), expected.encode('utf-8'))


def _normalize_handlers(handlers: Optional[WebhookHandlers]) -> Dict[WebhookEventType, WebhookHandler]:
    """Key handlers by WebhookEventType, also when given as plain strings.

    Keys that are not a known event type are dropped.
    """
    normalized: Dict[WebhookEventType, WebhookHandler] = {}
    for key, handler in (handlers or {}).items():
        try:
            normalized[WebhookEventType(key)] = handler
        except ValueError:
            logger.warning(f"Ignoring webhook handler for unknown event type {key!r}")
    return normalized


@dataclass
class WebhookRequest:
    """Minimal inbound request for frameworks whose request objects lack
    ``headers.get()`` / ``json()``.

    Example:
        # Django
        request = WebhookRequest(dict(req.headers), req.body)
        event = client.webhooks.handle_webhook(request, handlers)
    """
    headers_map: Dict[str, str] = field(default_factory=dict)
    body: Union[bytes, str] = b''

    @property
    def headers(self) -> _Headers:
        return _Headers(self.headers_map)

    def json(self) -> Any:
        return json.loads(self.body)


class BluefoxWebhooks(BluefoxModule):
    """Validate, parse and dispatch Bluefox webhooks.

    Request objects only need ``headers.get(name)`` and a ``json()``
    method. Frameworks where ``json`` is a property (Flask) or missing
    (Django) should wrap the request in WebhookRequest:

        WebhookRequest(dict(request.headers), request.get_data())

    Docs: https://bluefox.email/docs/integrations/webhooks
    """

    def validate_webhook(self,
                         request: Any,
                         api_key_override: Optional[str] = None,
                         rotation_api_keys: Optional[Iterable[str]] = None) -> bool:
        """Check the bearer token of an inbound webhook request.

        Args:
            request: Inbound request exposing ``headers.get()``
            api_key_override: Key to expect instead of the configured API key
            rotation_api_keys: Keys accepted instead of the primary key
                (for key rotation); include the primary key to keep it valid

        Returns:
            True if the request carries a valid key

        Raises:
            BluefoxError: VALIDATION_ERROR if key or request are missing,
                AUTHENTICATION_ERROR if the token is missing or not accepted

        Example:
            client.webhooks.validate_webhook(
                request,
                rotation_api_keys=['current-key', 'next-key'],
            )
        """
        primary_api_key = api_key_override or self.context.config.api_key
        self.validate_required_fields({'apiKey': primary_api_key, 'request': request})

        valid_api_keys = list(rotation_api_keys or []) or [primary_api_key]

        authorization = request.headers.get('Authorization') or ''
        parts = authorization.split(' ')
        header_api_key = parts[1] if len(parts) > 1 else None

        if not header_api_key:
            error = BluefoxError.authentication("No API key found in request headers")
            self.log_error("WebhookValidation.MissingKey", error)
            raise error

        if not any(_keys_match(header_api_key, key) for key in valid_api_keys if key):
            error = BluefoxError.authentication("Invalid API key")
            self.log_error("WebhookValidation.InvalidKey", error)
            raise error

        return True

    def parse_webhook_event(self, request: Any) -> WebhookEvent:
        """Parse the JSON body of a webhook request.

        Raises:
            BluefoxError: VALIDATION_ERROR if the body is not a JSON object

        Example:
            event = client.webhooks.parse_webhook_event(request)
            print(f"Received {event.type} event")
        """
        try:
            payload = request.json()
        except Exception as e:
            self.log_error("WebhookEvent.ParseError", e)
            raise BluefoxError.validation("Failed to parse webhook event", {'error': str(e)}) from e

        if not isinstance(payload, dict):
            error = BluefoxError.validation("Webhook event must be a JSON object")
            self.log_error("WebhookEvent.ParseError", error)
            raise error

        event = WebhookEvent.from_dict(payload)
        self.log_debug("WebhookEvent.Parsed", event)
        return event

    def handle_webhook(self,
                       request: Any,
                       handlers: Optional[WebhookHandlers] = None,
                       api_key_override: Optional[str] = None,
                       rotation_api_keys: Optional[Iterable[str]] = None) -> WebhookEvent:
        """Validate, parse and dispatch a webhook request.

        Handler exceptions are logged and swallowed so the webhook is
        always acknowledged. Events without a handler are returned as is.

        Args:
            request: Inbound request
            handlers: Mapping from WebhookEventType to a handler function
            api_key_override: Key to expect instead of the configured API key
            rotation_api_keys: Keys accepted instead of the primary key

        Returns:
            The parsed event

        Raises:
            BluefoxError: If validation or parsing fails

        Example:
            event = client.webhooks.handle_webhook(request, handlers={
                WebhookEventType.OPEN: lambda e: print(e.email_data['to']),
                WebhookEventType.CLICK: lambda e: print(e.link),
            })
        """
        self.log_debug("WebhookHandler.Input", {'handlers': list(handlers or {})})

        self.validate_webhook(request, api_key_override, rotation_api_keys)
        event = self.parse_webhook_event(request)

        handler = None
        if isinstance(event.type, WebhookEventType):
            handler = _normalize_handlers(handlers).get(event.type)
        if handler:
            try:
                handler(event)
            except Exception as e:
                # Webhook must still be acknowledged
                logger.error(f"Webhook handler for '{event.type}' failed: {e}", exc_info=True)

        return event

    # =========================================================================
    # Type Guards
    # =========================================================================

    @staticmethod
    def is_email_event(event: WebhookEvent) -> bool:
        """Sent, failed, click, open, bounce or complaint."""
        return event.type in EMAIL_EVENT_TYPES

    @staticmethod
    def is_subscription_event(event: WebhookEvent) -> bool:
        """Subscribe, unsubscribe, pause-subscription or resubscribe."""
        return event.type in SUBSCRIPTION_EVENT_TYPES

    @staticmethod
    def is_sent_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.SENT

    @staticmethod
    def is_failed_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.FAILED

    @staticmethod
    def is_click_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.CLICK

    @staticmethod
    def is_open_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.OPEN

    @staticmethod
    def is_bounce_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.BOUNCE

    @staticmethod
    def is_complaint_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.COMPLAINT

    @staticmethod
    def is_subscribe_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.SUBSCRIBE

    @staticmethod
    def is_unsubscribe_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.UNSUBSCRIBE

    @staticmethod
    def is_pause_subscription_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.PAUSE_SUBSCRIPTION

    @staticmethod
    def is_resubscribe_event(event: WebhookEvent) -> bool:
        return event.type == WebhookEventType.RESUBSCRIBE

    # =========================================================================
    # Testing
    # =========================================================================

    def test_webhook(self,
                     webhook_url: str,
                     event_type: Union[WebhookEventType, str],
                     custom_data: Optional[Dict[str, Any]] = None) -> Result:
        """Send a synthetic event to a webhook URL.

        The request goes through the normal request core and carries the
        configured API key as bearer token.

        Args:
            webhook_url: Absolute http(s) URL of the webhook endpoint
            event_type: Type of the test event
            custom_data: Payload fields merged over the generated event

        Returns:
            Result of the POST to the webhook URL

        Raises:
            BluefoxError: If the URL or event type is missing or invalid

        Example:
            result = client.webhooks.test_webhook(
                'https://example.com/webhooks/bluefox',
                WebhookEventType.OPEN,
                {'emailData': {'to': 'test@example.com'}},
            )
        """
        self.validate_required_fields({'webhookUrl': webhook_url, 'eventType': event_type})
        if not webhook_url.startswith(('http://', 'https://')):
            error = BluefoxError.validation("Webhook URL must be an absolute http(s) URL")
            self.log_error("WebhookTest.Url", error)
            raise error

        event_value = event_type.value if isinstance(event_type, WebhookEventType) else event_type
        payload: Dict[str, Any] = {
            'type': event_value,
            'account': {'name': 'Test Account', 'urlFriendlyName': 'test-account'},
            'project': {'name': 'Test Project'},
            'createdAt': datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
        }
        payload.update(custom_data or {})

        self.log_debug("WebhookTest.Payload", payload)
        result = self.request(webhook_url, 'POST', body=payload)
        self.log_debug("WebhookTest.Result", result)
        return result
