from __future__ import annotations

from pathlib import Path

from gaswiz.agents.shared.base_agent import BaseAgent
from gaswiz.prompting.prompt_builder import build_idea_expansion_message


class IdeaExpanderAgent(BaseAgent):
    """
    Turns a bare project name into a free-text app description.
    """

    stage = "idea_expansion"
    prompt_dir = Path(__file__).parent

    def run(self, project_name: str) -> str:
        self.logger.info("Expanding idea for project: %s", project_name)
        user_prompt = build_idea_expansion_message(project_name, self.locale)
        return self._call_llm(user_prompt, response_format="text").strip()
