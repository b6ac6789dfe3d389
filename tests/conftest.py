"""Shared test fixtures for kitchen_troubleshooting tests."""

import os

# Settings() is instantiated at import time and requires an API key.
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from typing import List, Optional, Type

import pytest

from kitchen_troubleshooting.domain.models import EquipmentContext, IssueContext
from kitchen_troubleshooting.execution.store import FlowStore
from kitchen_troubleshooting.llm.interface import LLMProvider, T
from kitchen_troubleshooting.schemas.actions import InitializeFlow
from kitchen_troubleshooting.schemas.decisions import AssistantReply
from kitchen_troubleshooting.state.models import AbstractStep


class FakeLLMProvider(LLMProvider):
    """Records every call and returns a canned reply (or raises `error`)."""

    def __init__(self, reply: Optional[AssistantReply] = None, error: Optional[Exception] = None):
        self.reply = reply or AssistantReply(content="Check the condenser coils for dust.")
        self.error = error
        self.calls: List[List[dict]] = []

    async def generate_structured_output(
        self,
        messages: List[dict],
        response_model: Type[T],
        temperature: float = 0.0,
    ) -> T:
        self.calls.append(messages)
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def equipment() -> EquipmentContext:
    return EquipmentContext(
        id="eq-1",
        display_name="Walk-in Cooler",
        category="refrigeration",
        manufacturer="Williams",
        model="HJ1SA",
        location_name="Back kitchen",
    )


@pytest.fixture
def issue() -> IssueContext:
    return IssueContext(
        id="issue-1",
        title="Not cooling",
        description="Cabinet temperature above 8C",
        severity="high",
    )


@pytest.fixture
def four_steps() -> List[AbstractStep]:
    """safety_check, visual_inspection, operational_test, resolution."""
    return [
        AbstractStep(id="safety_check", title="Safety", kind="safety_check",
                     safety_level="danger", time_estimate="1 minute"),
        AbstractStep(id="visual_inspection", title="Visual", kind="visual_inspection",
                     safety_level="safe", time_estimate="2 minutes"),
        AbstractStep(id="operational_test", title="Operational", kind="operational_test",
                     safety_level="caution", time_estimate="4 minutes"),
        AbstractStep(id="resolution", title="Resolution", kind="resolution",
                     safety_level="safe", time_estimate="1-2 minutes"),
    ]


@pytest.fixture
def init_action(equipment, issue, four_steps) -> InitializeFlow:
    return InitializeFlow(equipment=equipment, issue=issue, steps=four_steps)


@pytest.fixture
def active_store(equipment, issue, four_steps) -> FlowStore:
    """A store with the four-step flow started and compiled."""
    store = FlowStore()
    store.start(equipment, issue, four_steps)
    return store


@pytest.fixture
def fake_llm() -> FakeLLMProvider:
    return FakeLLMProvider()

