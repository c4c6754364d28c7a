"""
Shared fixtures for the telegraphkit test suite.
"""

# Standard library imports
import asyncio
from typing import AsyncGenerator

# Third-party imports
import pytest
import pytest_asyncio

# Local imports
from telegraphkit.api.client import TelegraphClient
from telegraphkit.config.config import ClientConfig, RateLimitPolicy, RetryPolicy

BASE_URL = "https://api.telegraph.test"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Client tests against a faked transport")
    config.addinivalue_line("markers", "slow: Tests that wait on real timers")


@pytest_asyncio.fixture(autouse=True)
async def cleanup_tasks() -> AsyncGenerator[None, None]:
    """
    Cancel any task a test leaves behind so that one hung waiter cannot
    stall the rest of the session.
    """
    tasks_before = asyncio.all_tasks()
    yield
    new_tasks = asyncio.all_tasks() - tasks_before

    for task in new_tasks:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Retry policy with millisecond delays."""
    return RetryPolicy(max_retries=3, initial_delay=0.001, max_delay=0.01, multiplier=2.0)


@pytest.fixture
def client_config(fast_retry: RetryPolicy) -> ClientConfig:
    return ClientConfig(
        base_url=BASE_URL,
        timeout=5.0,
        user_agent="telegraphkit-tests/1.0",
        retry=fast_retry,
        rate_limit=RateLimitPolicy(requests_per_second=1000.0),
    )


@pytest_asyncio.fixture
async def client(client_config: ClientConfig) -> AsyncGenerator[TelegraphClient, None]:
    """Initialized client pointed at the fake base URL."""
    async with TelegraphClient(client_config) as c:
        yield c


@pytest.fixture
def sample_html() -> str:
    return """<!DOCTYPE html>
<html>
  <head>
    <title>Sample Article</title>
    <meta name="author" content="Jane Doe">
    <meta name="url" content="https://jane.example.com">
    <meta name="description" content="A short sample">
    <style>p { color: red; }</style>
  </head>
  <body>
    <h1>Heading</h1>
    <div>Intro with <b>bold</b> and <i>italic</i>.</div>
    <p>See <a href="https://example.com" class="ext" target="_blank">this link</a>.</p>
    <img src="https://example.com/cat.png" alt="A cat" width="100">
    <script>alert("nope")</script>
    <!-- editorial note -->
    <ul><li>one</li><li>two</li></ul>
  </body>
</html>"""
