"""Tests for retry decision functions."""

import pytest
import requests

from retryhttp.policy import (
    Attempt,
    is_temporary,
    retry_all,
    retry_any,
    retry_http_methods,
    retry_is_err,
    retry_max_retries,
    retry_status_5xx,
    retry_status_interval,
    retry_statuses,
    retry_temporary_err,
)

from .helpers import make_request, make_response


def status_attempt(status: int, index: int = 0, method: str = "GET") -> Attempt:
    request = make_request(method)
    return Attempt(index=index, request=request, response=make_response(status, request))


def error_attempt(error: BaseException, index: int = 0) -> Attempt:
    return Attempt(index=index, request=make_request(), error=error)


class TemporaryFlag(Exception):
    def __init__(self, temporary):
        super().__init__("flagged")
        self.temporary = temporary


class TemporaryMethod(Exception):
    def __init__(self, result: bool):
        super().__init__("method")
        self._result = result

    def temporary(self) -> bool:
        return self._result


@pytest.mark.parametrize(
    "retries,methods,in_method,index,want",
    [
        (1, (), "GET", 0, False),
        (0, (), "GET", 1, False),
        (1, ("get",), "GET", 0, True),
        (1, ("GET",), "GET", 0, True),
        (1, ("GET",), "POST", 0, False),
        (2, ("GET", "POST"), "POST", 0, True),
        (2, ("GET", "POST"), "POST", 1, True),
        (2, ("GET", "POST"), "POST", 2, False),
        (2, ("GET", "POST"), "put", 0, False),
        (2, ("GET", "POST", "PUT"), "put", 0, True),
        (1, ("GET",), "GET", 5, False),
    ],
)
def test_retry_http_methods(retries, methods, in_method, index, want):
    fn = retry_http_methods(retries, *methods)
    attempt = Attempt(index=index, request=make_request(in_method))
    assert fn(attempt) is want


def test_retry_http_methods_alone_retries_successful_responses():
    fn = retry_http_methods(3, "GET")
    assert fn(status_attempt(200)) is True


@pytest.mark.parametrize(
    "status,index,want",
    [
        (500, 0, True),
        (503, 2, True),
        (599, 0, True),
        (499, 0, False),
        (600, 0, False),
        (200, 0, False),
        (503, 3, False),
    ],
)
def test_retry_status_5xx(status, index, want):
    assert retry_status_5xx(3)(status_attempt(status, index)) is want


def test_retry_status_5xx_without_response():
    assert retry_status_5xx(3)(error_attempt(requests.ConnectionError("down"))) is False


@pytest.mark.parametrize(
    "error,want",
    [
        (requests.ConnectionError("refused"), True),
        (requests.ConnectTimeout("slow"), True),
        (requests.ReadTimeout("slow"), True),
        (requests.exceptions.SSLError("bad cert"), False),
        (requests.HTTPError("404"), False),
        (ValueError("nope"), False),
        (TemporaryFlag(True), True),
        (TemporaryFlag(False), False),
        (TemporaryMethod(True), True),
        (TemporaryMethod(False), False),
    ],
)
def test_is_temporary(error, want):
    assert is_temporary(error) is want


def test_retry_temporary_err_respects_max_retries():
    fn = retry_temporary_err(2)
    error = requests.ConnectionError("refused")
    assert fn(error_attempt(error, 0)) is True
    assert fn(error_attempt(error, 1)) is True
    assert fn(error_attempt(error, 2)) is False


def test_retry_temporary_err_ignores_responses():
    assert retry_temporary_err(3)(status_attempt(503)) is False


def test_retry_any_empty_is_false():
    assert retry_any()(status_attempt(503)) is False


def test_retry_all_empty_is_true():
    assert retry_all()(status_attempt(200)) is True


@pytest.mark.parametrize(
    "f,g,want_all,want_any",
    [
        (True, True, True, True),
        (True, False, False, True),
        (False, True, False, True),
        (False, False, False, False),
    ],
)
def test_combinators(f, g, want_all, want_any):
    def fn_f(attempt):
        return f

    def fn_g(attempt):
        return g

    attempt = status_attempt(200)
    assert retry_all(fn_f, fn_g)(attempt) is want_all
    assert retry_any(fn_f, fn_g)(attempt) is want_any


def test_retry_max_retries():
    fn = retry_max_retries(2)
    assert fn(status_attempt(200, 0)) is True
    assert fn(status_attempt(200, 1)) is True
    assert fn(status_attempt(200, 2)) is False


def test_retry_statuses():
    fn = retry_statuses(3, 429, 503)
    assert fn(status_attempt(429)) is True
    assert fn(status_attempt(503)) is True
    assert fn(status_attempt(500)) is False
    assert fn(status_attempt(429, index=3)) is False
    assert fn(error_attempt(requests.ConnectionError("x"))) is False


def test_retry_status_interval_is_half_open():
    fn = retry_status_interval(3, 400, 500)
    assert fn(status_attempt(400)) is True
    assert fn(status_attempt(499)) is True
    assert fn(status_attempt(500)) is False


def test_retry_is_err():
    fn = retry_is_err(1, lambda e: isinstance(e, KeyError))
    assert fn(error_attempt(KeyError("k"))) is True
    assert fn(error_attempt(ValueError("v"))) is False
    assert fn(error_attempt(KeyError("k"), index=1)) is False
    assert fn(status_attempt(500)) is False
