from __future__ import annotations

from pathlib import Path

from gaswiz.agents.shared.base_agent import BaseAgent
from gaswiz.core.protocol import CodeGenerationRequest, GeneratedArtifacts
from gaswiz.core.shape import validate_code_shape
from gaswiz.prompting.prompt_builder import build_code_generation_message
from gaswiz.prompting.replay import assemble_artifacts
from gaswiz.utils.json_repair import extract_json


class CodeGeneratorAgent(BaseAgent):
    """
    Generates Code.gs and index.html, then derives the two text artifacts.

    With prompts_only=True no model call is made; only the sheet structure
    and replay prompt are returned.
    """

    stage = "code_generation"
    prompt_dir = Path(__file__).parent

    def run(self, request: CodeGenerationRequest, prompts_only: bool = False) -> GeneratedArtifacts:
        if prompts_only:
            self.logger.info("Assembling prompt artifacts only for project: %s", request.project_name)
            return assemble_artifacts(request, locale=self.locale)

        self.logger.info("Requesting source files for project: %s", request.project_name)
        user_prompt = build_code_generation_message(request, self.locale)

        raw = self._call_llm(user_prompt, response_format="json")
        code = validate_code_shape(extract_json(raw))

        return assemble_artifacts(request, code=code, locale=self.locale)
