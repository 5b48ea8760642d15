"""
User-message builders for the three wizard stages.

The system prompts tell the model to read the literal two-character
sequence backslash-n as a line break, so messages are joined with that
token rather than real newlines. Section order and labels are what the
system prompts describe; keep them stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from gaswiz.core.protocol import CodeGenerationRequest

LINE_BREAK = "\\n"
SECTION_BREAK = LINE_BREAK * 2
SECTION_RULE = "---"
BULLET = "- "

DEFAULT_LOCALE = "en"


@dataclass(frozen=True)
class PromptLabels:
    project_idea: str
    project_name: str
    app_description: str
    original_description: str
    final_sheet_name: str
    final_sheet_fields: str
    final_ui_elements: str
    target_api_key: str
    target_model: str
    target_sheet_id: str
    extra_requests: str
    stylish_design: str
    responsive_css: str
    other_requests: str
    yes: str
    no: str


LOCALES: Dict[str, PromptLabels] = {
    "en": PromptLabels(
        project_idea="Project idea",
        project_name="Project name",
        app_description="App description",
        original_description="Original app description",
        final_sheet_name="Final Google Sheet name",
        final_sheet_fields="Final Google Sheet fields (headers):",
        final_ui_elements="Final UI element list:",
        target_api_key="Gemini API key for the user app",
        target_model="Gemini model for the user app",
        target_sheet_id="Google Sheet ID for the user app",
        extra_requests="Additional requests:",
        stylish_design="Apply a polished, modern design",
        responsive_css="Include mobile responsive CSS",
        other_requests="Other",
        yes="Yes",
        no="No",
    ),
    "ko": PromptLabels(
        project_idea="프로젝트 아이디어",
        project_name="프로젝트 이름",
        app_description="앱 설명",
        original_description="원래 앱 설명",
        final_sheet_name="최종 구글 시트 이름",
        final_sheet_fields="최종 구글 시트 필드 (헤더):",
        final_ui_elements="최종 UI 요소 목록:",
        target_api_key="사용자 앱용 Gemini API 키",
        target_model="사용자 앱용 Gemini 모델",
        target_sheet_id="사용자 앱용 구글 시트 ID",
        extra_requests="추가 요청 사항:",
        stylish_design="최신 트렌드의 세련된 디자인 적용",
        responsive_css="모바일 반응형 CSS 포함",
        other_requests="기타",
        yes="예",
        no="아니오",
    ),
}


def get_labels(locale: str = DEFAULT_LOCALE) -> PromptLabels:
    try:
        return LOCALES[locale]
    except KeyError:
        raise ValueError(
            f"Unknown prompt locale '{locale}'. Known locales: {sorted(LOCALES)}"
        ) from None


def yes_no(flag: bool, labels: PromptLabels) -> str:
    return labels.yes if flag else labels.no


def bullets(items: List[str], sep: str = LINE_BREAK) -> str:
    return sep.join(f"{BULLET}{item}" for item in items)


def build_idea_expansion_message(project_name: str, locale: str = DEFAULT_LOCALE) -> str:
    labels = get_labels(locale)
    return f"{labels.project_idea}: {project_name}"


def build_design_message(
    project_name: str, app_description: str, locale: str = DEFAULT_LOCALE
) -> str:
    labels = get_labels(locale)
    return (
        f"{labels.project_name}: {project_name}"
        f"{LINE_BREAK}"
        f"{labels.app_description}: {app_description}"
    )


def build_code_generation_message(
    request: CodeGenerationRequest, locale: str = DEFAULT_LOCALE
) -> str:
    labels = get_labels(locale)

    sections = [
        f"{labels.project_name}: {request.project_name}",
        f"{labels.original_description}: {request.app_description}",
        SECTION_RULE,
        f"{labels.final_sheet_name}: {request.final_sheet_name}",
        f"{labels.final_sheet_fields}{LINE_BREAK}{bullets(request.final_sheet_fields)}",
        SECTION_RULE,
        f"{labels.final_ui_elements}{LINE_BREAK}{bullets(request.final_ui_elements)}",
        SECTION_RULE,
        f"{labels.target_api_key}: {request.target_api_key}",
        f"{labels.target_model}: {request.target_model}",
        f"{labels.target_sheet_id}: {request.target_sheet_id}",
        SECTION_RULE,
        labels.extra_requests,
        f"{BULLET}{labels.stylish_design}: {yes_no(request.apply_stylish_design, labels)}",
        f"{BULLET}{labels.responsive_css}: {yes_no(request.include_responsive_css, labels)}",
    ]
    if request.other_requests.strip():
        sections.append(f"{BULLET}{labels.other_requests}: {request.other_requests}")

    return SECTION_BREAK.join(sections)
