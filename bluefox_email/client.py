"""
Bluefox API client composing the subscriber, email and webhook modules.
"""

import logging
from typing import Optional, Tuple

import requests

from .config import BluefoxConfig, BluefoxContext, ProgressCallback
from .emails import BluefoxEmail
from .subscriber import BluefoxSubscriber
from .webhooks import BluefoxWebhooks

logger = logging.getLogger(__name__)


class BluefoxClient:
    """Client for the Bluefox.email API.

    All modules share one context: the configuration, the HTTP session
    and the rate limiter state.

    Example:
        client = BluefoxClient(BluefoxConfig(api_key="..."))
        result = client.subscriber.add("list-123", "John Doe", "john@example.com")
        if not result.ok:
            print(result.error.code)
    """

    def __init__(self, config: BluefoxConfig, session: Optional[requests.Session] = None):
        """Initialize Bluefox client.

        Args:
            config: BluefoxConfig with API key and settings
            session: Optional requests.Session to use as transport
        """
        self.config = config
        self.context = BluefoxContext.from_config(config, session)

        self.subscriber = BluefoxSubscriber(self.context)
        self.email = BluefoxEmail(self.context)
        self.webhooks = BluefoxWebhooks(self.context)

        logger.debug(f"Bluefox client initialized for {self.context.base_url}")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides) -> 'BluefoxClient':
        """Create a client from BLUEFOX_* environment variables.

        See BluefoxConfig.from_env for the variables read.
        """
        return cls(BluefoxConfig.from_env(dotenv_path, **overrides))

    def set_progress_callback(self, callback: Optional[ProgressCallback]):
        """Set callback for retry and rate limit notifications.

        Args:
            callback: Called as ``callback(event, **info)``. Events are
                'retry' (error, attempt, max_retries, wait_time) and
                'rate_limited' (error).
        """
        self.context.progress_callback = callback

    @property
    def rate_limit(self) -> Tuple[float, float, float]:
        """Last known (limit, remaining, reset) reported by the API."""
        return self.context.rate_limiter.info
