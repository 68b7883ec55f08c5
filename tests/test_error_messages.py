import httpx

from gainsly.client.errors import (
    FALLBACK_MESSAGE,
    NETWORK_MESSAGE,
    STATUS_MESSAGES,
    TIMEOUT_MESSAGE,
    ApiError,
    get_error_message,
)


def test_server_message_wins():
    assert get_error_message(ApiError(404, "Workout not found")) == "Workout not found"


def test_status_fallbacks():
    for status_code in (401, 403, 404, 500):
        assert get_error_message(ApiError(status_code)) == STATUS_MESSAGES[status_code]


def test_unknown_status_without_message():
    assert get_error_message(ApiError(418)) == FALLBACK_MESSAGE


def test_timeout():
    assert get_error_message(httpx.ReadTimeout("slow")) == TIMEOUT_MESSAGE


def test_network_error():
    assert get_error_message(httpx.ConnectError("refused")) == NETWORK_MESSAGE


def test_plain_exception_uses_its_text():
    assert get_error_message(ValueError("bad input")) == "bad input"
    assert get_error_message(RuntimeError()) == FALLBACK_MESSAGE
