from __future__ import annotations

from typing import Any, Tuple

from gaswiz.core.protocol import DesignProposal

DESIGN_STAGE = "design proposal"
CODE_STAGE = "code generation"


class MissingStructureError(ValueError):
    def __init__(self, stage: str, expected: str) -> None:
        super().__init__(
            f"Missing expected structure in {stage} response ({expected})."
        )
        self.stage = stage


def validate_design_shape(data: Any) -> DesignProposal:
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("sheet_name"), str)
        or not data["sheet_name"].strip()
        or not isinstance(data.get("sheet_fields"), list)
        or not isinstance(data.get("ui_elements"), list)
    ):
        raise MissingStructureError(DESIGN_STAGE, "sheet_name, sheet_fields, ui_elements")

    return DesignProposal(
        sheet_name=data["sheet_name"],
        sheet_fields=[str(f) for f in data["sheet_fields"]],
        ui_elements=[str(e) for e in data["ui_elements"]],
    )


def validate_code_shape(data: Any) -> Tuple[str, str]:
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("code_gs"), str)
        or not isinstance(data.get("index_html"), str)
    ):
        raise MissingStructureError(CODE_STAGE, "code_gs, index_html")
    return data["code_gs"], data["index_html"]
