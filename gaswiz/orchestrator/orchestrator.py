from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, TypeVar

from gaswiz.agents.code_generator.agent import CodeGeneratorAgent
from gaswiz.agents.designer.agent import DesignerAgent
from gaswiz.agents.idea_expander.agent import IdeaExpanderAgent
from gaswiz.config.settings import WizardConfig
from gaswiz.core.protocol import (
    DEFAULT_TARGET_MODEL,
    CodeGenerationRequest,
    DesignProposal,
    GeneratedArtifacts,
)
from gaswiz.llm.client import WizardClient
from gaswiz.orchestrator.state_machine import WizardState, transition
from gaswiz.utils.logger import get_logger

T = TypeVar("T")

IDEA_ERROR_PREFIX = "Error generating app description"
DESIGN_ERROR_PREFIX = "Error generating design proposal"
CODE_ERROR_PREFIX = "Error generating app code"
PROMPTS_ERROR_PREFIX = "Error assembling prompt files"


class MissingInputError(ValueError):
    pass


@dataclass
class DeploymentParams:
    """Stage-2 inputs the user types in after accepting the proposal."""

    target_api_key: str
    target_sheet_id: str
    target_model: str = DEFAULT_TARGET_MODEL
    final_sheet_name: Optional[str] = None
    final_ui_elements: Optional[List[str]] = None
    apply_stylish_design: bool = True
    include_responsive_css: bool = True
    other_requests: str = ""


@dataclass
class WizardSession:
    project_name: str = ""
    app_description: str = ""
    proposal: Optional[DesignProposal] = None
    artifacts: Optional[GeneratedArtifacts] = None
    error: Optional[str] = None
    state: WizardState = WizardState.IDLE
    history: List[WizardState] = field(default_factory=list)


class Wizard:
    """
    Top-level controller for one wizard run.

    Pipeline:
    1) (optional) Idea expansion: project name -> app description
    2) Design proposal: name + description -> DesignProposal (user may edit)
    3) Code generation: proposal + deployment params -> GeneratedArtifacts
       (or prompt files only, without calling the model)

    Every stage method catches its own failures, stores one message in
    `error` and returns None. Earlier accepted results are never cleared by
    a failing stage.
    """

    def __init__(self, client: WizardClient, cfg: Optional[WizardConfig] = None) -> None:
        self.cfg = cfg or WizardConfig()
        self.client = client
        self.logger = get_logger("Wizard")

        self.idea_agent = IdeaExpanderAgent(client, locale=self.cfg.locale)
        self.design_agent = DesignerAgent(client, locale=self.cfg.locale)
        self.code_agent = CodeGeneratorAgent(client, locale=self.cfg.locale)

        self.session = WizardSession()

    # ---------- read-only views ----------

    @property
    def state(self) -> WizardState:
        return self.session.state

    @property
    def error(self) -> Optional[str]:
        return self.session.error

    @property
    def proposal(self) -> Optional[DesignProposal]:
        return self.session.proposal

    @property
    def artifacts(self) -> Optional[GeneratedArtifacts]:
        return self.session.artifacts

    def clear_error(self) -> None:
        self.session.error = None

    # ---------- stages ----------

    def expand_idea(self, project_name: str) -> Optional[str]:
        self.clear_error()
        if not project_name.strip():
            return self._reject("Enter a project name first.")

        # idea expansion is a side helper and does not drive the state machine
        return self._guard(
            IDEA_ERROR_PREFIX, lambda: self.idea_agent.run(project_name), tracked=False
        )

    def request_design(self, project_name: str, app_description: str) -> Optional[DesignProposal]:
        self.clear_error()
        if not project_name.strip() or not app_description.strip():
            return self._reject("Enter both a project name and an app description.")

        self._move(WizardState.PROPOSAL_REQUESTED)
        proposal = self._guard(
            DESIGN_ERROR_PREFIX,
            lambda: self.design_agent.run(project_name, app_description),
        )
        if proposal is None:
            return None

        self.session.project_name = project_name
        self.session.app_description = app_description
        self.session.proposal = proposal
        self.session.artifacts = None
        self._move(WizardState.PROPOSAL_READY)
        return proposal

    def restore_proposal(
        self, project_name: str, app_description: str, proposal: DesignProposal
    ) -> None:
        """Load a proposal saved from an earlier run, as if stage 1 had just finished."""
        self.restart()
        self.session.project_name = project_name
        self.session.app_description = app_description
        self.session.proposal = proposal
        self._move(WizardState.PROPOSAL_READY)

    def edit_sheet_name(self, name: str) -> Optional[DesignProposal]:
        return self._edit(lambda p: p.with_sheet_name(name))

    def edit_field(self, index: int, value: str) -> Optional[DesignProposal]:
        return self._edit(lambda p: p.with_field(index, value))

    def edit_ui_element(self, index: int, value: str) -> Optional[DesignProposal]:
        return self._edit(lambda p: p.with_ui_element(index, value))

    def generate_code(self, params: DeploymentParams) -> Optional[GeneratedArtifacts]:
        return self._run_build(params, prompts_only=False)

    def generate_prompts_only(self, params: DeploymentParams) -> Optional[GeneratedArtifacts]:
        return self._run_build(params, prompts_only=True)

    def restart(self) -> None:
        self.logger.info("Restarting wizard.")
        self.session = WizardSession()

    # ---------- helpers ----------

    def build_request(self, params: DeploymentParams) -> CodeGenerationRequest:
        proposal = self.session.proposal
        if proposal is None:
            raise MissingInputError("No design proposal yet. Request a design first.")
        if not params.target_api_key.strip() or not params.target_sheet_id.strip():
            raise MissingInputError("Enter the Gemini API key and the Google Sheet ID.")

        return CodeGenerationRequest.from_proposal(
            proposal,
            project_name=self.session.project_name,
            app_description=self.session.app_description,
            target_api_key=params.target_api_key,
            target_sheet_id=params.target_sheet_id,
            target_model=params.target_model,
            final_sheet_name=params.final_sheet_name,
            final_ui_elements=params.final_ui_elements,
            apply_stylish_design=params.apply_stylish_design,
            include_responsive_css=params.include_responsive_css,
            other_requests=params.other_requests,
        )

    def _run_build(self, params: DeploymentParams, prompts_only: bool) -> Optional[GeneratedArtifacts]:
        self.clear_error()
        try:
            request = self.build_request(params)
        except MissingInputError as exc:
            return self._reject(str(exc))

        if prompts_only:
            prefix = PROMPTS_ERROR_PREFIX
        else:
            prefix = CODE_ERROR_PREFIX
            self._move(WizardState.CODE_REQUESTED)

        artifacts = self._guard(prefix, lambda: self.code_agent.run(request, prompts_only=prompts_only))
        if artifacts is None:
            return None

        self.session.artifacts = artifacts
        self._move(WizardState.PROMPTS_ONLY_READY if prompts_only else WizardState.CODE_READY)
        return artifacts

    def _edit(self, change: Callable[[DesignProposal], DesignProposal]) -> Optional[DesignProposal]:
        proposal = self.session.proposal
        if proposal is None:
            return self._reject("No design proposal to edit.")

        try:
            updated = change(proposal)
        except (IndexError, ValueError) as exc:
            return self._reject(f"Cannot edit proposal: {exc}")

        self.session.proposal = updated
        self.session.artifacts = None
        self._move(WizardState.PROPOSAL_READY)
        return updated

    def _guard(self, prefix: str, fn: Callable[[], T], tracked: bool = True) -> Optional[T]:
        try:
            return fn()
        except Exception as exc:  # noqa: BLE001
            self.logger.error("%s: %s", prefix, exc)
            self.session.error = f"{prefix}: {exc}"
            if tracked:
                self._move(WizardState.ERROR)
            return None

    def _reject(self, message: str) -> None:
        self.logger.warning("Rejected before any remote call: %s", message)
        self.session.error = message
        return None

    def _move(self, target: WizardState) -> None:
        self.session.state = transition(self.session.state, target)
        self.session.history.append(target)
