from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class WizardState(str, Enum):
    IDLE = "idle"
    PROPOSAL_REQUESTED = "proposal_requested"
    PROPOSAL_READY = "proposal_ready"
    CODE_REQUESTED = "code_requested"
    CODE_READY = "code_ready"
    PROMPTS_ONLY_READY = "prompts_only_ready"
    ERROR = "error"


class InvalidTransitionError(ValueError):
    def __init__(self, current: WizardState, target: WizardState) -> None:
        super().__init__(f"Cannot move wizard from '{current.value}' to '{target.value}'")
        self.current = current
        self.target = target


_S = WizardState

TRANSITIONS: Dict[WizardState, FrozenSet[WizardState]] = {
    # PROPOSAL_READY straight from IDLE: restoring a saved proposal
    _S.IDLE: frozenset({_S.PROPOSAL_REQUESTED, _S.PROPOSAL_READY}),
    _S.PROPOSAL_REQUESTED: frozenset({_S.PROPOSAL_READY, _S.ERROR}),
    # self-loop: editing the proposal
    _S.PROPOSAL_READY: frozenset(
        {_S.PROPOSAL_READY, _S.PROPOSAL_REQUESTED, _S.CODE_REQUESTED, _S.PROMPTS_ONLY_READY, _S.ERROR}
    ),
    _S.CODE_REQUESTED: frozenset({_S.CODE_READY, _S.ERROR}),
    _S.CODE_READY: frozenset(
        {_S.PROPOSAL_READY, _S.PROPOSAL_REQUESTED, _S.CODE_REQUESTED, _S.PROMPTS_ONLY_READY, _S.ERROR}
    ),
    _S.PROMPTS_ONLY_READY: frozenset(
        {_S.PROPOSAL_READY, _S.PROPOSAL_REQUESTED, _S.CODE_REQUESTED, _S.PROMPTS_ONLY_READY, _S.ERROR}
    ),
    # retry of whichever stage failed; the orchestrator checks a proposal exists
    _S.ERROR: frozenset(
        {_S.PROPOSAL_REQUESTED, _S.PROPOSAL_READY, _S.CODE_REQUESTED, _S.PROMPTS_ONLY_READY, _S.ERROR}
    ),
}


def can_transition(current: WizardState, target: WizardState) -> bool:
    if target is WizardState.IDLE:
        return True
    return target in TRANSITIONS[current]


def transition(current: WizardState, target: WizardState) -> WizardState:
    """Return `target` if the move is allowed. Restart to IDLE is always allowed."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return target
