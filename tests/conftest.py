"""Shared fixtures: a scripted fake provider injected into WizardClient."""

from typing import Any, Dict, List, Optional

import pytest

from gaswiz.core.protocol import CodeGenerationRequest, DesignProposal
from gaswiz.llm.client import WizardClient


class FakeProvider:
    """Returns queued responses in order and records every call."""

    name = "fake"

    def __init__(self, responses: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.responses = list(responses or [])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def generate(self, content, *, system_instruction, response_format="text", model=None):
        self.calls.append(
            {
                "content": content,
                "system_instruction": system_instruction,
                "response_format": response_format,
            }
        )
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def client(fake_provider):
    c = WizardClient(provider_factory=lambda api_key, model: fake_provider)
    assert c.init("test-key")
    return c


@pytest.fixture
def proposal():
    return DesignProposal(
        sheet_name="Recipes",
        sheet_fields=["A: Name (recipe title)", "B: Rating (1-5)", "C: Notes"],
        ui_elements=["h1: Recipe Box", "input: Name", "button: Save"],
    )


@pytest.fixture
def code_request(proposal):
    return CodeGenerationRequest.from_proposal(
        proposal,
        project_name="Recipe Box",
        app_description="Users log recipes and rate them",
        target_api_key="AIza-target",
        target_sheet_id="sheet-123",
        target_model="gemini-2.5-flash",
    )
