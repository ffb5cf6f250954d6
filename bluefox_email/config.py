"""
Configuration dataclasses for the Bluefox client.
"""

import os
from dataclasses import dataclass, field
from typing import Callable, Optional

import requests
from dotenv import load_dotenv

from .models import HttpResponse, RequestOptions
from .rate_limiter import RateLimiter

DEFAULT_BASE_URL = "https://api.bluefox.email/v1"

RequestInterceptor = Callable[[RequestOptions], RequestOptions]
ResponseInterceptor = Callable[[HttpResponse], HttpResponse]
ProgressCallback = Callable[..., None]


def _env_flag(value: Optional[str]) -> bool:
    return (value or '').strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class BluefoxConfig:
    """Configuration for the Bluefox API client.

    Attributes:
        api_key: Bluefox API key (sent as Bearer token)
        debug: Enable debug logging of requests, responses and validation
        request_timeout: Request timeout in milliseconds
        max_retries: Maximum attempts per request (first attempt included)
        base_url: Override for the API base URL
        request_interceptor: Called with RequestOptions before sending,
            returns the options to use
        response_interceptor: Called with the HttpResponse of a successful
            request, returns the response to hand back
    """
    api_key: str
    debug: bool = False
    request_timeout: int = 15000
    max_retries: int = 3
    base_url: Optional[str] = None
    request_interceptor: Optional[RequestInterceptor] = None
    response_interceptor: Optional[ResponseInterceptor] = None

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("api_key is required")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides) -> 'BluefoxConfig':
        """Build a config from environment variables (and a .env file).

        Reads BLUEFOX_API_KEY, BLUEFOX_DEBUG, BLUEFOX_REQUEST_TIMEOUT,
        BLUEFOX_MAX_RETRIES and BLUEFOX_BASE_URL. Keyword arguments take
        precedence over the environment.

        Example:
            config = BluefoxConfig.from_env(debug=True)
        """
        load_dotenv(dotenv_path)

        values = {
            'api_key': os.getenv("BLUEFOX_API_KEY", ""),
            'debug': _env_flag(os.getenv("BLUEFOX_DEBUG")),
            'base_url': os.getenv("BLUEFOX_BASE_URL") or None,
        }
        if os.getenv("BLUEFOX_REQUEST_TIMEOUT"):
            values['request_timeout'] = int(os.getenv("BLUEFOX_REQUEST_TIMEOUT"))
        if os.getenv("BLUEFOX_MAX_RETRIES"):
            values['max_retries'] = int(os.getenv("BLUEFOX_MAX_RETRIES"))

        values.update(overrides)
        return cls(**values)


@dataclass
class BluefoxContext:
    """State shared by all modules of one client.

    Attributes:
        config: Client configuration
        base_url: Resolved API base URL (no trailing slash)
        rate_limiter: Rate limiter updated from every successful response
        session: HTTP session used as transport
        progress_callback: Optional listener for retries and rate limits
    """
    config: BluefoxConfig
    base_url: str = DEFAULT_BASE_URL
    rate_limiter: RateLimiter = field(default_factory=RateLimiter)
    session: requests.Session = field(default_factory=requests.Session)
    progress_callback: Optional[ProgressCallback] = None

    @classmethod
    def from_config(cls, config: BluefoxConfig,
                    session: Optional[requests.Session] = None) -> 'BluefoxContext':
        """Create a context for a config, resolving the base URL."""
        base_url = (config.base_url or DEFAULT_BASE_URL).rstrip('/')
        return cls(
            config=config,
            base_url=base_url,
            session=session if session is not None else requests.Session(),
        )
