"""Tests for transactional and triggered email sending."""

import pytest

from bluefox_email.errors import BluefoxError, ErrorCode
from bluefox_email.models import Attachment, SendTransactionalOptions, SendTriggeredOptions


@pytest.fixture(autouse=True)
def ok_response(session, make_response):
    session.request.return_value = make_response(200, {'success': True})


def sent_body(session):
    return session.request.call_args.kwargs['json']


def test_send_transactional(client, session):
    result = client.email.send_transactional(SendTransactionalOptions(
        to='john@example.com',
        transactional_id='welcome-email',
        data={'name': 'John'},
        attachments=[Attachment('hello.txt', 'SGVsbG8=')],
    ))

    assert result.ok
    assert session.request.call_args.args == ('POST', 'https://api.bluefox.email/v1/send-transactional')
    assert sent_body(session) == {
        'email': 'john@example.com',
        'transactionalId': 'welcome-email',
        'data': {'name': 'John'},
        'attachments': [{'fileName': 'hello.txt', 'content': 'SGVsbG8='}],
    }


def test_send_transactional_omits_unset_options(client, session):
    client.email.send_transactional(SendTransactionalOptions(to='john@example.com', transactional_id='t-1'))

    assert sent_body(session) == {'email': 'john@example.com', 'transactionalId': 't-1'}


def test_send_transactional_keeps_empty_data(client, session):
    client.email.send_transactional(SendTransactionalOptions(to='john@example.com', transactional_id='t-1', data={}))

    assert sent_body(session)['data'] == {}


def test_send_transactional_rejects_invalid_attachment(client, session):
    options = SendTransactionalOptions(
        to='john@example.com',
        transactional_id='t-1',
        attachments=[{'fileName': 'a.txt', 'content': 'not-base64!!'}],
    )

    with pytest.raises(BluefoxError) as exc_info:
        client.email.send_transactional(options)

    assert exc_info.value.message == "Invalid base64 content for attachment a.txt"
    session.request.assert_not_called()


def test_send_transactional_missing_fields(client):
    with pytest.raises(BluefoxError) as exc_info:
        client.email.send_transactional(SendTransactionalOptions(to='', transactional_id=''))

    assert exc_info.value.message == "Missing required fields: to, transactionalId"


def test_send_triggered(client, session):
    result = client.email.send_triggered(SendTriggeredOptions(
        emails=['john@example.com', 'jane@example.com'],
        triggered_id='payment-reminder',
    ))

    assert result.ok
    assert session.request.call_args.args == ('POST', 'https://api.bluefox.email/v1/send-triggered')
    assert sent_body(session) == {
        'emails': ['john@example.com', 'jane@example.com'],
        'triggeredId': 'payment-reminder',
    }


def test_send_triggered_requires_emails(client, session):
    with pytest.raises(BluefoxError) as exc_info:
        client.email.send_triggered(SendTriggeredOptions(emails=[], triggered_id='t-1'))

    assert exc_info.value.message == "Missing required fields: emails"
    session.request.assert_not_called()


def test_send_triggered_requires_a_list(client):
    with pytest.raises(BluefoxError) as exc_info:
        client.email.send_triggered(SendTriggeredOptions(emails='john@example.com', triggered_id='t-1'))

    assert exc_info.value.message == "Emails must be a non-empty list"


def test_send_triggered_validates_every_email(client, session):
    with pytest.raises(BluefoxError) as exc_info:
        client.email.send_triggered(SendTriggeredOptions(emails=['john@example.com', 'bad'], triggered_id='t-1'))

    assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
    session.request.assert_not_called()


def test_send_server_error_is_returned(client, session, make_response, no_sleep):
    session.request.return_value = make_response(
        405, {'error': {'name': 'METHOD_NOT_ALLOWED', 'message': 'Insufficient credits'}}, reason='Method Not Allowed',
    )

    result = client.email.send_transactional(SendTransactionalOptions(to='john@example.com', transactional_id='t-1'))

    assert result.error.code == ErrorCode.INSUFFICIENT_CREDITS
    assert result.error.status == 405
