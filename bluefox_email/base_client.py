"""
Base module with the request core shared by all Bluefox API modules.

Provides:
- HTTP request handling with timeout, retries and exponential backoff
- Client-side rate limit gate
- Classification of failed responses into BluefoxError codes
- Request/response interceptors
- Input validation helpers
- Debug logging and progress notifications
"""

import base64
import logging
import re
import time
from typing import Any, Dict, Optional

import requests

from .config import BluefoxContext
from .errors import BluefoxError, ErrorCode
from .models import (
    Err,
    HttpResponse,
    Json,
    Ok,
    RequestOptions,
    Result,
    attachment_to_dict,
)
from .utils import log_debug, log_error, redact_headers, strip_undefined_keys

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

BASE_BACKOFF_MS = 1000
MAX_BACKOFF_MS = 10000

# Error name -> [(message fragment, code)], checked in order
SERVER_ERROR_RULES = {
    'VALIDATION_ERROR': [
        ('Email already exists', ErrorCode.DUPLICATE_EMAIL),
        ('pausedUntil date', ErrorCode.INVALID_DATE),
        ('AWS configurations not found', ErrorCode.MISSING_AWS_CONFIG),
        ('Missing required parameters', ErrorCode.MISSING_PARAMETERS),
        ('Triggered email not found', ErrorCode.VALIDATION_ERROR),
    ],
    'METHOD_NOT_ALLOWED': [
        ('flagged due to bouncing', ErrorCode.METHOD_NOT_ALLOWED),
        ('Insufficient credits', ErrorCode.INSUFFICIENT_CREDITS),
    ],
}


def error_code_from_status(status: int) -> ErrorCode:
    """Map an HTTP status to an ErrorCode."""
    if status == 429:
        return ErrorCode.RATE_LIMIT_ERROR
    if status in (401, 403):
        return ErrorCode.AUTHENTICATION_ERROR
    if status == 405:
        return ErrorCode.METHOD_NOT_ALLOWED
    if status == 400:
        return ErrorCode.VALIDATION_ERROR
    if status >= 500:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN_ERROR


def classify_error_response(status: int, reason: str, error_data: Json) -> BluefoxError:
    """Build a BluefoxError from a failed response.

    A structured body ``{"error": {"name", "message"}}`` is matched
    against known server errors first; the status mapping is the fallback.

    Args:
        status: HTTP status code
        reason: HTTP reason phrase
        error_data: Parsed error body

    Returns:
        Classified BluefoxError with the body in ``details``
    """
    error_field = error_data.get('error')

    if isinstance(error_field, dict) and error_field.get('name'):
        message = error_field.get('message') or reason
        for fragment, code in SERVER_ERROR_RULES.get(error_field['name'], []):
            if fragment in message:
                return BluefoxError(code, message, status, error_data)

    if isinstance(error_field, dict) and error_field.get('message'):
        message = error_field['message']
    elif isinstance(error_field, str) and error_field:
        message = error_field
    else:
        message = error_data.get('message') or reason

    return BluefoxError(error_code_from_status(status), message, status, error_data)


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after a failed attempt (0-based), capped at 10s."""
    return min(BASE_BACKOFF_MS * 2 ** attempt, MAX_BACKOFF_MS) / 1000


class BluefoxModule:
    """Base class for all Bluefox API modules.

    Provides common functionality:
    - Authenticated JSON requests with timeout and retries
    - Rate limit handling
    - Error classification
    - Input validation
    - Debug logging and progress callbacks

    Transport and server failures are returned as Err results. Validation
    helpers raise BluefoxError directly.
    """

    def __init__(self, context: BluefoxContext):
        """Initialize module.

        Args:
            context: Context shared with the other modules of the client
        """
        self.context = context
        self.max_retries = max(1, context.config.max_retries)
        self.request_timeout = context.config.request_timeout or 15000
        self.debug = context.config.debug

    # =========================================================================
    # Logging
    # =========================================================================

    def log_debug(self, name: str, data: Any):
        """Log debug data when debug mode is enabled."""
        if self.debug:
            log_debug(name, data)

    def log_error(self, name: str, error: Any):
        """Log an error when debug mode is enabled."""
        if self.debug:
            log_error(name, error)

    def _notify_progress(self, event: str, **info):
        """Forward retry/rate limit events to the progress callback if set."""
        callback = self.context.progress_callback
        if callback:
            callback(event, **info)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_required_fields(self, fields: Dict[str, Any]):
        """Check that all given fields have a value.

        Any falsy value (None, "", 0, False, empty list) counts as missing.

        Raises:
            BluefoxError: VALIDATION_ERROR listing every missing field
        """
        self.log_debug("Validation.RequiredFields", fields)
        missing_fields = [key for key, value in fields.items() if not value]

        if missing_fields:
            error = BluefoxError.validation(f"Missing required fields: {', '.join(missing_fields)}")
            self.log_error("Validation.RequiredFields", error)
            raise error

    def validate_email(self, email: Any):
        """Check the basic shape of an email address.

        Raises:
            BluefoxError: VALIDATION_ERROR if the address does not match
        """
        self.log_debug("Validation.Email", {'email': email})
        if not isinstance(email, str) or not EMAIL_PATTERN.fullmatch(email):
            error = BluefoxError.validation("Invalid email address format")
            self.log_error("Validation.Email", error)
            raise error

    def validate_attachments(self, attachments: Any):
        """Check attachments before sending.

        Every attachment needs a fileName and base64 encoded content.
        Stops at the first invalid attachment.

        Raises:
            BluefoxError: VALIDATION_ERROR describing the first problem
        """
        if not isinstance(attachments, (list, tuple)):
            error = BluefoxError.validation("Attachments must be a list")
            self.log_error("Validation.Attachments", error)
            raise error

        normalized = [attachment_to_dict(attachment) for attachment in attachments]
        self.log_debug("Validation.Attachments", {
            'count': len(normalized),
            'fileNames': [a.get('fileName') for a in normalized],
        })

        for index, attachment in enumerate(normalized):
            file_name = attachment.get('fileName')
            content = attachment.get('content')

            if not file_name:
                error = BluefoxError.validation(f"Missing fileName for attachment at index {index}")
            elif not content:
                error = BluefoxError.validation(f"Missing content for attachment at index {index}")
            elif not self._is_base64(content):
                error = BluefoxError.validation(f"Invalid base64 content for attachment {file_name}")
            else:
                continue

            self.log_error("Validation.Attachments", error)
            raise error

    @staticmethod
    def _is_base64(content: Any) -> bool:
        try:
            base64.b64decode(content, validate=True)
        except (TypeError, ValueError):
            return False
        return True

    # =========================================================================
    # Requests
    # =========================================================================

    def _build_url(self, path: str) -> str:
        """Build full URL from path (absolute URLs are used as is)."""
        if path.startswith(('http://', 'https://')):
            return path
        return f"{self.context.base_url}/{path.lstrip('/')}"

    def request(self,
                path: str,
                method: str,
                headers: Optional[Dict[str, str]] = None,
                body: Optional[Json] = None,
                timeout: Optional[int] = None) -> Result:
        """Make an authenticated request to the Bluefox API.

        Args:
            path: Endpoint path (e.g. "subscriber-lists/123") or absolute URL
            method: HTTP method (GET, POST, PATCH, PUT, DELETE)
            headers: Extra headers
            body: JSON body; UNSET values are dropped
            timeout: Timeout override in milliseconds

        Returns:
            Ok(HttpResponse) on success, Err(BluefoxError) otherwise.
            Never raises for transport or server failures.

        Example:
            result = module.request("subscriber-lists/123", "GET")
            if result.ok:
                print(result.value.data['count'])
        """
        options = RequestOptions(
            path=path,
            method=method,
            headers=dict(headers or {}),
            body=strip_undefined_keys(body) if body is not None else None,
            timeout=timeout,
        )

        self.log_debug("Request", {
            'url': self._build_url(path),
            'method': method,
            'headers': redact_headers(options.headers),
            'body': options.body,
        })

        interceptor = self.context.config.request_interceptor
        if interceptor:
            try:
                options = interceptor(options) or options
            except Exception as e:
                self.log_error("RequestInterceptorError", e)
                return self._handle_error(e)
            self.log_debug("RequestInterceptor", {
                'path': options.path,
                'method': options.method,
                'headers': redact_headers(options.headers),
                'body': options.body,
            })

        try:
            self.context.rate_limiter.check_rate_limit()
        except BluefoxError as e:
            logger.warning(f"Bluefox rate limit exhausted, request to {options.path} rejected")
            self._notify_progress('rate_limited', error=e)
            return self._handle_error(e)

        return self._execute_request(options)

    def _execute_request(self, options: RequestOptions) -> Result:
        """Run the retry loop for a prepared request."""
        last_error: Optional[BluefoxError] = None

        for attempt in range(self.max_retries):
            if attempt > 0:
                self.log_debug("RetryAttempt", {'attempt': attempt, 'maxRetries': self.max_retries})

            try:
                response = self._perform_request(options)
            except BluefoxError as error:
                last_error = error
                will_retry = self._should_retry(error, attempt)
                self.log_error("RequestError", {'attempt': attempt, 'error': error, 'willRetry': will_retry})

                if not will_retry:
                    return Err(error)

                wait_time = backoff_delay(attempt)
                logger.warning(
                    f"Bluefox request failed with {error.code.value} "
                    f"(attempt {attempt + 1}/{self.max_retries}). Retrying in {wait_time}s..."
                )
                self._notify_progress('retry', error=error, attempt=attempt,
                                      max_retries=self.max_retries, wait_time=wait_time)
                time.sleep(wait_time)
                continue

            return self._build_result(response)

        return Err(last_error or BluefoxError.unknown("Max retries exceeded"))

    def _perform_request(self, options: RequestOptions) -> requests.Response:
        """Send one HTTP request.

        Returns:
            Response object with a 2xx status

        Raises:
            BluefoxError: Timeout, network failure or classified error response
        """
        url = self._build_url(options.path)
        timeout_ms = options.timeout or self.request_timeout
        request_headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.context.config.api_key}',
            **options.headers,
        }

        self.log_debug("FetchRequest", {
            'url': url,
            'method': options.method,
            'headers': redact_headers(request_headers),
        })

        try:
            response = self.context.session.request(
                options.method,
                url,
                headers=request_headers,
                json=options.body,
                timeout=timeout_ms / 1000,
            )
        except requests.exceptions.Timeout as e:
            raise BluefoxError.timeout(f"Request timeout exceeded after {timeout_ms}ms") from e
        except requests.exceptions.RequestException as e:
            raise BluefoxError.network(f"Network error occurred: {e}") from e

        if not 200 <= response.status_code < 300:
            raise self._error_from_response(response)

        return response

    def _error_from_response(self, response: requests.Response) -> BluefoxError:
        reason = response.reason or ''
        try:
            error_data = response.json()
        except ValueError:
            error_data = {'message': reason}
        if not isinstance(error_data, dict):
            error_data = {'message': reason}

        return classify_error_response(response.status_code, reason, error_data)

    def _build_result(self, response: requests.Response) -> Result:
        """Turn a 2xx response into the final result.

        Parse and interceptor failures are final and not retried.
        """
        if response.content:
            try:
                data = response.json()
            except ValueError:
                error = BluefoxError.unknown("Failed to parse JSON response", response.status_code)
                self.log_error("ResponseParseError", error)
                return Err(error)
        else:
            data = {}

        headers = {str(key).lower(): value for key, value in response.headers.items()}
        http_response = HttpResponse(
            data=data,
            status=response.status_code,
            headers=headers,
            timestamp=int(time.time() * 1000),
        )

        self.context.rate_limiter.update_from_headers(headers)
        self.log_debug("Response", {'status': http_response.status, 'headers': headers, 'data': data})

        interceptor = self.context.config.response_interceptor
        if interceptor:
            try:
                http_response = interceptor(http_response) or http_response
            except Exception as e:
                self.log_error("ResponseInterceptorError", e)
                return self._handle_error(e)
            self.log_debug("ResponseInterceptor", {'modifiedResponse': http_response})

        return Ok(http_response)

    def _should_retry(self, error: BluefoxError, attempt: int) -> bool:
        return error.is_retryable and attempt < self.max_retries - 1

    def _handle_error(self, error: Exception) -> Err:
        """Normalize any exception into an Err result."""
        if not isinstance(error, BluefoxError):
            error = BluefoxError.unknown(str(error) or type(error).__name__)
        self.log_error("BluefoxError", error)
        return Err(error)
