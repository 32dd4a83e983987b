import pytest

from athena_query.core.retry import RetryPolicy


@pytest.fixture
def no_delay_policy() -> RetryPolicy:
    return RetryPolicy(delay_seconds=0)
