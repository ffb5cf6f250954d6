"""Tests for BluefoxError."""

from bluefox_email.errors import BluefoxError, ErrorCode


def test_validation_error():
    error = BluefoxError.validation("Invalid email address format")

    assert error.code == ErrorCode.VALIDATION_ERROR
    assert error.status == 400
    assert error.message == "Invalid email address format"
    assert str(error) == "Invalid email address format"
    assert not error.is_retryable


def test_rate_limit_error_carries_reset():
    error = BluefoxError.rate_limit(2000000000000)

    assert error.code == ErrorCode.RATE_LIMIT_ERROR
    assert error.status == 429
    assert error.details == {'reset': 2000000000000}
    assert error.message.startswith("Rate limit exceeded. Resets at 2033-05-18T03:33:20")


def test_rate_limit_error_with_reset_outside_datetime_range():
    error = BluefoxError.rate_limit(1900000000000000)

    assert error.code == ErrorCode.RATE_LIMIT_ERROR
    assert error.message == "Rate limit exceeded. Resets at 1900000000000000ms"
    assert error.details == {'reset': 1900000000000000}


def test_timeout_and_network_statuses():
    assert BluefoxError.timeout().status == 408
    assert BluefoxError.network().status == 0
    assert BluefoxError.unknown("boom").status == 0
    assert BluefoxError.authentication("Invalid API key").status == 401


def test_only_server_and_network_errors_are_retryable():
    retryable = {code for code in ErrorCode if BluefoxError(code, 'x').is_retryable}

    assert retryable == {ErrorCode.SERVER_ERROR, ErrorCode.NETWORK_ERROR}


def test_to_dict_omits_empty_details():
    assert BluefoxError.network().to_dict() == {
        'code': 'NETWORK_ERROR',
        'message': "Network error occurred",
        'status': 0,
    }
    assert BluefoxError.validation("bad", {'field': 'email'}).to_dict()['details'] == {'field': 'email'}


def test_error_is_an_exception():
    try:
        raise BluefoxError.validation("Missing required fields: email")
    except BluefoxError as e:
        assert e.code == ErrorCode.VALIDATION_ERROR
