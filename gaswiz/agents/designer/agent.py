from __future__ import annotations

from pathlib import Path

from gaswiz.agents.shared.base_agent import BaseAgent
from gaswiz.core.protocol import DesignProposal
from gaswiz.core.shape import validate_design_shape
from gaswiz.prompting.prompt_builder import build_design_message
from gaswiz.utils.json_repair import extract_json


class DesignerAgent(BaseAgent):
    """
    Asks the model for a sheet schema and UI element list.
    """

    stage = "design_proposal"
    prompt_dir = Path(__file__).parent

    def run(self, project_name: str, app_description: str) -> DesignProposal:
        self.logger.info("Requesting design proposal for project: %s", project_name)
        user_prompt = build_design_message(project_name, app_description, self.locale)

        raw = self._call_llm(user_prompt, response_format="json")
        proposal = validate_design_shape(extract_json(raw))

        self.logger.info(
            "Design proposal: sheet=%s fields=%d ui_elements=%d",
            proposal.sheet_name,
            len(proposal.sheet_fields),
            len(proposal.ui_elements),
        )
        return proposal
