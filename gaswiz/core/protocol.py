from __future__ import annotations

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_TARGET_MODEL = "gemini-2.5-flash"

CODE_GS_FILE = "Code.gs"
INDEX_HTML_FILE = "index.html"
SHEET_STRUCTURE_FILE = "sheet_structure.txt"
REPLAY_PROMPT_FILE = "claude_prompt.txt"


LINE_BREAK_RE = re.compile(r"\s*[\r\n]+\s*")


def single_line(text: str) -> str:
    """Strip the ends and fold embedded line breaks into one space."""
    return LINE_BREAK_RE.sub(" ", text.strip())


def clean_lines(items: List[str]) -> List[str]:
    return [single_line(s) for s in items if s and s.strip()]


def _required_sheet_name(value: str) -> str:
    value = single_line(value)
    if not value:
        raise ValueError("Sheet name cannot be blank")
    return value


def _replace_at(items: List[str], index: int, value: str) -> List[str]:
    if not 0 <= index < len(items):
        raise IndexError(f"index {index} out of range (0..{len(items) - 1})")
    updated = list(items)
    updated[index] = single_line(value)
    return updated


class DesignProposal(BaseModel):
    """
    Stage-1 result: a sheet schema plus the UI element list.

    Edits return a new proposal with exactly one entry replaced.
    """

    sheet_name: str
    sheet_fields: List[str] = Field(default_factory=list)  # e.g. "A: Timestamp (entry time)"
    ui_elements: List[str] = Field(default_factory=list)  # e.g. "h1: Page title"

    @field_validator("sheet_name")
    @classmethod
    def _require_sheet_name(cls, value: str) -> str:
        return _required_sheet_name(value)

    @field_validator("sheet_fields", "ui_elements")
    @classmethod
    def _single_line_entries(cls, value: List[str]) -> List[str]:
        return [single_line(s) for s in value]

    # model_copy skips validation, so the edit helpers check their input themselves

    def with_sheet_name(self, name: str) -> "DesignProposal":
        return self.model_copy(update={"sheet_name": _required_sheet_name(name)})

    def with_field(self, index: int, value: str) -> "DesignProposal":
        return self.model_copy(update={"sheet_fields": _replace_at(self.sheet_fields, index, value)})

    def with_ui_element(self, index: int, value: str) -> "DesignProposal":
        return self.model_copy(update={"ui_elements": _replace_at(self.ui_elements, index, value)})

    def ui_elements_text(self) -> str:
        return "\n".join(self.ui_elements)

    @staticmethod
    def parse_lines(text: str) -> List[str]:
        return clean_lines(text.splitlines())


class CodeGenerationRequest(BaseModel):
    project_name: str
    app_description: str

    target_api_key: str = ""
    target_model: str = DEFAULT_TARGET_MODEL
    target_sheet_id: str = ""

    final_sheet_name: str
    final_sheet_fields: List[str] = Field(default_factory=list)
    final_ui_elements: List[str] = Field(default_factory=list)

    apply_stylish_design: bool = True
    include_responsive_css: bool = True
    other_requests: str = ""

    @field_validator("final_sheet_name")
    @classmethod
    def _fold_sheet_name(cls, value: str) -> str:
        return single_line(value)

    @field_validator("final_sheet_fields", "final_ui_elements")
    @classmethod
    def _drop_blank_entries(cls, value: List[str]) -> List[str]:
        return clean_lines(value)

    @classmethod
    def from_proposal(
        cls,
        proposal: DesignProposal,
        *,
        project_name: str,
        app_description: str,
        target_api_key: str,
        target_sheet_id: str,
        target_model: str = DEFAULT_TARGET_MODEL,
        final_sheet_name: Optional[str] = None,
        final_ui_elements: Optional[List[str]] = None,
        apply_stylish_design: bool = True,
        include_responsive_css: bool = True,
        other_requests: str = "",
    ) -> "CodeGenerationRequest":
        return cls(
            project_name=project_name,
            app_description=app_description,
            target_api_key=target_api_key,
            target_model=target_model or DEFAULT_TARGET_MODEL,
            target_sheet_id=target_sheet_id,
            final_sheet_name=single_line(final_sheet_name or "") or proposal.sheet_name,
            final_sheet_fields=list(proposal.sheet_fields),
            final_ui_elements=(
                list(final_ui_elements) if final_ui_elements is not None else list(proposal.ui_elements)
            ),
            apply_stylish_design=apply_stylish_design,
            include_responsive_css=include_responsive_css,
            other_requests=other_requests,
        )


class GeneratedArtifacts(BaseModel):
    code_gs: Optional[str] = None
    index_html: Optional[str] = None
    sheet_structure_txt: str
    claude_prompt_txt: str

    @model_validator(mode="after")
    def _sources_come_in_pairs(self) -> "GeneratedArtifacts":
        if (self.code_gs is None) != (self.index_html is None):
            raise ValueError("code_gs and index_html must be generated together")
        return self

    @property
    def prompts_only(self) -> bool:
        return self.code_gs is None

    def to_files(self) -> Dict[str, str]:
        files: Dict[str, str] = {}
        if self.code_gs is not None and self.index_html is not None:
            files[CODE_GS_FILE] = self.code_gs
            files[INDEX_HTML_FILE] = self.index_html
        files[SHEET_STRUCTURE_FILE] = self.sheet_structure_txt
        files[REPLAY_PROMPT_FILE] = self.claude_prompt_txt
        return files
