import os

import pytest

from arborist.core.models import WorkItem
from arborist.providers.database.memory_provider import InMemoryWorkItemStore


@pytest.fixture
def clean_environment(monkeypatch):
    """Ensure tests run with a clean environment.

    - Unset ARBORIST_* variables that can alter configuration.
    - Unset OpenAI credentials to avoid accidental network init.
    """
    to_clear = [k for k in os.environ.keys() if k.startswith("ARBORIST_")]
    to_clear += ["OPENAI_API_KEY", "OPENAI_BASE_URL"]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture
def product_tree() -> InMemoryWorkItemStore:
    """Small hierarchy without embeddings.

    Product Launch
    ├── Marketing Campaign
    │   ├── Write blog post about launch
    │   └── Design social media graphics
    └── Website Redesign
        └── Implement checkout page (done)
    Personal
    """
    return InMemoryWorkItemStore(
        [
            WorkItem(
                id="launch",
                title="Product Launch",
                description="Ship the new product to customers",
            ),
            WorkItem(
                id="marketing",
                title="Marketing Campaign",
                description="Promote the launch across channels",
                parent_id="launch",
            ),
            WorkItem(
                id="blog",
                title="Write blog post about launch",
                description="Announcement article for the company blog",
                parent_id="marketing",
            ),
            WorkItem(
                id="graphics",
                title="Design social media graphics",
                parent_id="marketing",
            ),
            WorkItem(
                id="website",
                title="Website Redesign",
                description="Refresh the marketing website",
                vision="A faster website that converts visitors",
                parent_id="launch",
            ),
            WorkItem(
                id="checkout",
                title="Implement checkout page",
                parent_id="website",
                done=True,
            ),
            WorkItem(id="personal", title="Personal"),
        ]
    )


@pytest.fixture
def log_messages():
    """Capture loguru messages at WARNING and above."""
    from loguru import logger

    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
