"""
Transactional and triggered email sending.
"""

from typing import List, Optional

from .base_client import BluefoxModule
from .errors import BluefoxError
from .models import (
    AttachmentLike,
    Result,
    SendTransactionalOptions,
    SendTriggeredOptions,
    attachment_to_dict,
)
from .utils import UNSET

SEND_TRANSACTIONAL_PATH = "send-transactional"
SEND_TRIGGERED_PATH = "send-triggered"


def _optional(value):
    """Map None to UNSET so the key is left out of the request body."""
    return UNSET if value is None else value


def _attachments_payload(attachments: Optional[List[AttachmentLike]]):
    if attachments is None:
        return UNSET
    return [attachment_to_dict(attachment) for attachment in attachments]


class BluefoxEmail(BluefoxModule):
    """Send templated emails.

    API docs: https://bluefox.email/docs/api/send-transactional-email
    """

    def send_transactional(self, options: SendTransactionalOptions) -> Result:
        """Send a transactional email to a single recipient.

        Args:
            options: Recipient, template ID, template data and attachments

        Returns:
            Result with ``{"success": true}`` in ``value.data``

        Raises:
            BluefoxError: If validation fails

        Example:
            result = client.email.send_transactional(SendTransactionalOptions(
                to="john@example.com",
                transactional_id="welcome-email",
                data={"name": "John"},
            ))
        """
        self.log_debug("SendTransactional.Input", options)
        self._validate_transactional_options(options)

        result = self.request(
            SEND_TRANSACTIONAL_PATH,
            'POST',
            body={
                'email': options.to,
                'transactionalId': options.transactional_id,
                'data': _optional(options.data),
                'attachments': _attachments_payload(options.attachments),
            },
        )

        self.log_debug("SendTransactional.Result", result)
        return result

    def send_triggered(self, options: SendTriggeredOptions) -> Result:
        """Send a triggered email to one or more recipients.

        Args:
            options: Recipients, triggered email ID, template data and attachments

        Raises:
            BluefoxError: If validation fails

        Example:
            result = client.email.send_triggered(SendTriggeredOptions(
                emails=["john@example.com"],
                triggered_id="payment-reminder",
            ))
        """
        self.log_debug("SendTriggered.Input", options)
        self._validate_triggered_options(options)

        result = self.request(
            SEND_TRIGGERED_PATH,
            'POST',
            body={
                'emails': list(options.emails),
                'triggeredId': options.triggered_id,
                'data': _optional(options.data),
                'attachments': _attachments_payload(options.attachments),
            },
        )

        self.log_debug("SendTriggered.Result", result)
        return result

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_transactional_options(self, options: SendTransactionalOptions):
        self.validate_required_fields({
            'to': options.to,
            'transactionalId': options.transactional_id,
        })
        self.validate_email(options.to)

        if options.attachments is not None:
            self.validate_attachments(options.attachments)

    def _validate_triggered_options(self, options: SendTriggeredOptions):
        self.validate_required_fields({
            'emails': options.emails,
            'triggeredId': options.triggered_id,
        })

        if not isinstance(options.emails, (list, tuple)) or not options.emails:
            error = BluefoxError.validation("Emails must be a non-empty list")
            self.log_error("EmailValidation.TriggeredOptions.Emails", error)
            raise error

        for email in options.emails:
            self.validate_email(email)

        if options.attachments is not None:
            self.validate_attachments(options.attachments)
