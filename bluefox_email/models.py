"""
Data types for the Bluefox API client.

Provides:
- Result types (Ok / Err) returned by every API operation
- HttpResponse and RequestOptions used by the request core
- Enums mirroring server-side values
- Send options and attachments for the email module
- WebhookEvent parsed from inbound webhook payloads
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from .errors import BluefoxError

T = TypeVar('T')

Json = Dict[str, Any]


# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome of an API call."""
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Err:
    """Failed outcome of an API call."""
    error: BluefoxError
    ok: bool = field(default=False, init=False)


Result = Union[Ok[T], Err]


@dataclass
class HttpResponse(Generic[T]):
    """Parsed response of a successful request.

    Attributes:
        data: Parsed JSON body
        status: HTTP status code
        headers: Response headers with lower-cased names
        timestamp: Epoch milliseconds at which the response was received
    """
    data: T
    status: int
    headers: Dict[str, str]
    timestamp: int


@dataclass
class RequestOptions:
    """Options for a single request, as seen by the request interceptor.

    Attributes:
        path: Endpoint path relative to the base URL, or an absolute URL
        method: HTTP method
        headers: Extra request headers
        body: JSON body (None for no body)
        timeout: Per-request timeout override in milliseconds
    """
    path: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Json] = None
    timeout: Optional[int] = None


# =============================================================================
# Enums
# =============================================================================

class SubscriberStatus(str, Enum):
    ACTIVE = 'active'
    UNSUBSCRIBED = 'unsubscribed'
    PAUSED = 'paused'


class WebhookEventType(str, Enum):
    SENT = 'sent'
    FAILED = 'failed'
    CLICK = 'click'
    OPEN = 'open'
    BOUNCE = 'bounce'
    COMPLAINT = 'complaint'
    SUBSCRIBE = 'subscribe'
    UNSUBSCRIBE = 'unsubscribe'
    PAUSE_SUBSCRIPTION = 'pause-subscription'
    RESUBSCRIBE = 'resubscribe'


EMAIL_EVENT_TYPES = frozenset({
    WebhookEventType.SENT,
    WebhookEventType.FAILED,
    WebhookEventType.CLICK,
    WebhookEventType.OPEN,
    WebhookEventType.BOUNCE,
    WebhookEventType.COMPLAINT,
})

SUBSCRIPTION_EVENT_TYPES = frozenset({
    WebhookEventType.SUBSCRIBE,
    WebhookEventType.UNSUBSCRIBE,
    WebhookEventType.PAUSE_SUBSCRIPTION,
    WebhookEventType.RESUBSCRIBE,
})


# =============================================================================
# Email Options
# =============================================================================

@dataclass
class Attachment:
    """A file attached to an email.

    Attributes:
        file_name: File name shown to the recipient
        content: Base64 encoded file content
    """
    file_name: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dict for API request."""
        return {'fileName': self.file_name, 'content': self.content}


AttachmentLike = Union[Attachment, Dict[str, Any]]


def attachment_to_dict(attachment: Any) -> Dict[str, Any]:
    """Normalize an Attachment or {'fileName', 'content'} dict for the API."""
    if isinstance(attachment, Attachment):
        return attachment.to_dict()
    if isinstance(attachment, dict):
        return dict(attachment)
    return {}


@dataclass
class SendTransactionalOptions:
    """Options for sending a transactional email.

    Attributes:
        to: Recipient email address
        transactional_id: ID of the transactional email template
        data: Data merged into the template
        attachments: Optional file attachments
    """
    to: str
    transactional_id: str
    data: Optional[Dict[str, Any]] = None
    attachments: Optional[List[AttachmentLike]] = None


@dataclass
class SendTriggeredOptions:
    """Options for sending a triggered email.

    Attributes:
        emails: Recipient email addresses
        triggered_id: ID of the triggered email template
        data: Data merged into the template
        attachments: Optional file attachments
    """
    emails: List[str]
    triggered_id: str
    data: Optional[Dict[str, Any]] = None
    attachments: Optional[List[AttachmentLike]] = None


# =============================================================================
# Webhook Types
# =============================================================================

@dataclass
class WebhookEvent:
    """An inbound webhook notification.

    ``type`` is a WebhookEventType for known events and the raw string
    otherwise. The full payload is kept in ``raw``.
    """
    type: Union[WebhookEventType, str]
    account: Dict[str, Any] = field(default_factory=dict)
    project: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    email_data: Optional[Dict[str, Any]] = None
    user_agent: Optional[str] = None
    referer: Optional[str] = None
    ip_address: Optional[str] = None
    errors: Optional[List[Any]] = None
    block_position: Optional[str] = None
    block_name: Optional[str] = None
    link: Optional[str] = None
    subscription: Optional[Dict[str, Any]] = None
    raw: Json = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Json) -> 'WebhookEvent':
        """Create from webhook payload dict."""
        raw_type = data.get('type') or ''
        if not isinstance(raw_type, str):
            raw_type = str(raw_type)
        try:
            event_type: Union[WebhookEventType, str] = WebhookEventType(raw_type)
        except ValueError:
            event_type = raw_type

        return cls(
            type=event_type,
            account=data.get('account') or {},
            project=data.get('project') or {},
            created_at=data.get('createdAt'),
            email_data=data.get('emailData'),
            user_agent=data.get('userAgent'),
            referer=data.get('referer'),
            ip_address=data.get('ipAddress'),
            errors=data.get('errors'),
            block_position=data.get('blockPosition'),
            block_name=data.get('blockName'),
            link=data.get('link'),
            subscription=data.get('subscription'),
            raw=data,
        )
