"""Tests for subscriber list management."""

from datetime import datetime, timedelta, timezone

import pytest

from bluefox_email.errors import BluefoxError, ErrorCode
from bluefox_email.subscriber import to_iso_utc

LIST_URL = 'https://api.bluefox.email/v1/subscriber-lists/list-1'


@pytest.fixture
def ok_response(session, make_response):
    session.request.return_value = make_response(
        200, {'_id': 'sub-1', 'email': 'john@example.com', 'name': 'John', 'status': 'active'},
    )
    return session.request.return_value


def request_args(session):
    method, url = session.request.call_args.args
    return method, url, session.request.call_args.kwargs['json']


def test_add(client, session, ok_response):
    result = client.subscriber.add('list-1', 'John', 'john@example.com')

    assert result.ok
    assert result.value.data['status'] == 'active'
    assert request_args(session) == ('POST', LIST_URL, {'name': 'John', 'email': 'john@example.com'})


def test_add_reports_missing_fields(client, session):
    with pytest.raises(BluefoxError) as exc_info:
        client.subscriber.add('list-1', '', 'john@example.com')

    assert exc_info.value.message == "Missing required fields: name"
    session.request.assert_not_called()


def test_add_rejects_invalid_email(client, session):
    with pytest.raises(BluefoxError) as exc_info:
        client.subscriber.add('list-1', 'John', 'not-an-email')

    assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
    session.request.assert_not_called()


def test_add_duplicate_email_is_returned_as_err(client, session, make_response):
    session.request.return_value = make_response(
        400, {'error': {'name': 'VALIDATION_ERROR', 'message': 'Email already exists'}}, reason='Bad Request',
    )

    result = client.subscriber.add('list-1', 'John', 'john@example.com')

    assert not result.ok
    assert result.error.code == ErrorCode.DUPLICATE_EMAIL


def test_remove(client, session, ok_response):
    client.subscriber.remove('list-1', 'john@example.com')

    assert request_args(session) == ('PATCH', f'{LIST_URL}/john@example.com', {'status': 'unsubscribed'})


def test_activate(client, session, ok_response):
    client.subscriber.activate('list-1', 'john@example.com')

    assert request_args(session) == ('PATCH', f'{LIST_URL}/john@example.com', {'status': 'active'})


def test_pause(client, session, ok_response):
    until = datetime(2099, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    client.subscriber.pause('list-1', 'john@example.com', until)

    assert request_args(session) == (
        'PATCH',
        f'{LIST_URL}/john@example.com',
        {'status': 'paused', 'pausedUntil': '2099-01-02T03:04:05.000Z'},
    )


def test_pause_rejects_past_date(client, session):
    with pytest.raises(BluefoxError) as exc_info:
        client.subscriber.pause('list-1', 'john@example.com', datetime.now(timezone.utc) - timedelta(days=1))

    assert exc_info.value.message == "Pause date must be in the future"
    session.request.assert_not_called()


def test_pause_rejects_non_datetime(client, session):
    with pytest.raises(BluefoxError) as exc_info:
        client.subscriber.pause('list-1', 'john@example.com', '2099-01-01')

    assert exc_info.value.message == "Invalid date format"


def test_list(client, session, make_response):
    session.request.return_value = make_response(200, {'items': [{'email': 'john@example.com'}], 'count': 1})

    result = client.subscriber.list('list-1')

    assert result.value.data['count'] == 1
    assert request_args(session) == ('GET', LIST_URL, None)


def test_get_one(client, session, ok_response):
    result = client.subscriber.get_one('list-1', 'john@example.com')

    assert result.value.data['_id'] == 'sub-1'
    assert request_args(session) == ('GET', f'{LIST_URL}/john@example.com', None)


def test_update_one_sends_only_given_fields(client, session, ok_response):
    client.subscriber.update_one('list-1', 'john@example.com', new_name='Johnny')

    assert request_args(session) == ('PATCH', f'{LIST_URL}/john@example.com', {'name': 'Johnny'})


def test_update_one_validates_new_email(client, session):
    with pytest.raises(BluefoxError):
        client.subscriber.update_one('list-1', 'john@example.com', new_email='broken')

    session.request.assert_not_called()


def test_to_iso_utc_treats_naive_as_utc():
    assert to_iso_utc(datetime(2030, 6, 1, 12, 0, 0)) == '2030-06-01T12:00:00.000Z'
    assert to_iso_utc(datetime(2030, 6, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))) == '2030-06-01T12:00:00.000Z'
