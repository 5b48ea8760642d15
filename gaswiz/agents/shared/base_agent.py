from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from gaswiz.llm.client import LLMRequest, ResponseFormat, WizardClient
from gaswiz.prompting.prompt_builder import DEFAULT_LOCALE
from gaswiz.utils.logger import get_logger


class BaseAgent(ABC):
    """
    Base class for the wizard stages.
    Loads the stage's system prompt from prompt.md next to the agent module.
    """

    stage: str = "default"
    prompt_dir: Path

    def __init__(self, client: WizardClient, locale: str = DEFAULT_LOCALE) -> None:
        self.client = client
        self.locale = locale
        self.logger = get_logger(self.__class__.__name__)
        self._system_prompt = (self.prompt_dir / "prompt.md").read_text(encoding="utf-8")

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @abstractmethod
    def run(self, *args: Any, **kwargs: Any) -> Any:
        ...

    def _call_llm(self, user_prompt: str, response_format: ResponseFormat = "text") -> str:
        req = LLMRequest(
            system_instruction=self._system_prompt,
            content=user_prompt,
            response_format=response_format,
            stage=self.stage,
        )
        self.logger.info("Calling LLM for stage=%s (%s)", self.stage, response_format)
        return self.client.generate(req)
