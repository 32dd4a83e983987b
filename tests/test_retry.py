import pytest
from botocore.exceptions import ReadTimeoutError

from athena_query.core.retry import RetryPolicy, error_code, is_transient_error
from athena_query.utils.errors import TransientServiceError

from tests.stubs import client_error


class CodedError(Exception):
    def __init__(self, code):
        super().__init__(code)
        self.code = code


@pytest.mark.parametrize("exc", [
    client_error("ThrottlingException"),
    client_error("TooManyRequestsException"),
    ReadTimeoutError(endpoint_url="https://athena.eu-west-1.amazonaws.com"),
    TransientServiceError("throttled"),
    CodedError("NetworkingError"),
    CodedError("UnknownEndpoint"),
])
def test_transient_errors(exc):
    assert is_transient_error(exc)


@pytest.mark.parametrize("exc", [
    client_error("InvalidRequestException"),
    client_error("AccessDeniedException"),
    CodedError("SomethingElse"),
    ValueError("bad"),
])
def test_non_transient_errors(exc):
    assert not is_transient_error(exc)


def test_error_code():
    assert error_code(client_error("ThrottlingException")) == "ThrottlingException"
    assert error_code(CodedError("NetworkingError")) == "NetworkingError"
    assert error_code(ValueError("x")) is None


def test_policy_defaults_are_unbounded():
    policy = RetryPolicy()

    assert policy.delay_seconds == 2.0
    assert policy.max_retries is None
    assert policy.max_duration_seconds is None


def test_from_millis():
    policy = RetryPolicy.from_millis(500, max_retries=3)

    assert policy.delay_seconds == 0.5
    assert policy.max_retries == 3
