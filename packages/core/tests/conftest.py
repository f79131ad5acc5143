from __future__ import annotations

import pytest

from cleantrack_core.models import Category, ComplaintInput
from cleantrack_core.workflow import ComplaintWorkflow
from cleantrack_store.memory import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def workflow(store):
    return ComplaintWorkflow(store)


@pytest.fixture
def make_input():
    def _make_input(title="Pothole on Main", category=Category.ROAD_DAMAGE, user_id="u1", images=None):
        return ComplaintInput(
            title=title,
            description="Deep pothole near the bus stop",
            category=category,
            user_id=user_id,
            user_name="Asha",
            images=images or [],
        )

    return _make_input
