"""
Bluefox Email Package

Python client for the Bluefox.email API.

Main exports:
- BluefoxClient: Client with subscriber, email and webhooks modules
- BluefoxConfig: Configuration dataclass
- BluefoxError, ErrorCode: Error model
- Ok, Err: Result types returned by API operations
- WebhookEvent, WebhookEventType, WebhookRequest: Webhook types

The Streamlit-integrated client lives in bluefox_email.streamlit_wrappers
and needs the optional 'streamlit' extra.
"""

from .client import BluefoxClient
from .config import BluefoxConfig
from .errors import BluefoxError, ErrorCode
from .models import (
    Attachment,
    Err,
    HttpResponse,
    Ok,
    RequestOptions,
    SendTransactionalOptions,
    SendTriggeredOptions,
    SubscriberStatus,
    WebhookEvent,
    WebhookEventType,
)
from .utils import UNSET
from .webhooks import WebhookRequest

__version__ = '1.0.0'

__all__ = [
    'BluefoxClient',
    'BluefoxConfig',
    'BluefoxError',
    'ErrorCode',
    'Ok',
    'Err',
    'HttpResponse',
    'RequestOptions',
    'Attachment',
    'SendTransactionalOptions',
    'SendTriggeredOptions',
    'SubscriberStatus',
    'WebhookEvent',
    'WebhookEventType',
    'WebhookRequest',
    'UNSET',
]
