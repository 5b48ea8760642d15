from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Optional

from gaswiz.llm.providers.gemini_api import GeminiProvider

logger = logging.getLogger(__name__)

ResponseFormat = Literal["text", "json"]
ProviderFactory = Callable[[str, str], Any]

DEFAULT_WIZARD_MODEL = "gemini-2.5-flash"


class ClientNotInitializedError(RuntimeError):
    pass


class GenerationError(RuntimeError):
    pass


@dataclass
class LLMRequest:
    system_instruction: str
    content: str
    response_format: ResponseFormat = "text"
    stage: str = "default"


def _default_factory(api_key: str, model: str) -> GeminiProvider:
    return GeminiProvider(api_key=api_key, model=model)


class WizardClient:
    """
    Holds the one provider the wizard talks to.

    The handle is passed explicitly to agents and the orchestrator. Calling
    `init` again replaces the provider; there is only ever one credential.
    """

    def __init__(
        self,
        model: str = DEFAULT_WIZARD_MODEL,
        provider_factory: Optional[ProviderFactory] = None,
    ) -> None:
        self.model = model
        self._factory = provider_factory or _default_factory
        self._provider: Any = None

    @property
    def is_initialized(self) -> bool:
        return self._provider is not None

    def init(self, api_key: Optional[str]) -> bool:
        if not api_key or not api_key.strip():
            logger.error("WizardClient: attempted to initialize with an empty API key.")
            self._provider = None
            return False

        try:
            self._provider = self._factory(api_key.strip(), self.model)
        except Exception as exc:  # noqa: BLE001
            logger.error("WizardClient: failed to initialize provider: %s", exc)
            self._provider = None
            return False

        logger.info("WizardClient: provider initialized (model=%s).", self.model)
        return True

    def generate(self, req: LLMRequest) -> str:
        if self._provider is None:
            raise ClientNotInitializedError(
                "Wizard AI is not initialized. Set an API key and try again."
            )

        provider_name = getattr(self._provider, "name", self._provider.__class__.__name__)
        logger.info(
            "WizardClient: stage=%s format=%s provider=%s",
            req.stage,
            req.response_format,
            provider_name,
        )
        try:
            return self._provider.generate(
                req.content,
                system_instruction=req.system_instruction,
                response_format=req.response_format,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("WizardClient: provider %s failed for stage=%s (%s)", provider_name, req.stage, exc)
            raise GenerationError(str(exc)) from exc
