"""
Artifacts derived from the request without any model call.

`sheet_structure.txt` summarises the final sheet schema. `claude_prompt.txt`
is a two-part transcript a user can paste into another chat assistant to
redo the design and build conversation by hand. Both are pure functions
of the CodeGenerationRequest.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from gaswiz.core.protocol import CodeGenerationRequest, GeneratedArtifacts
from gaswiz.prompting.prompt_builder import DEFAULT_LOCALE, get_labels, yes_no

SHEET_NAME_PREFIX = "Sheet Name: "
SHEET_FIELDS_HEADER = "Sheet Fields (Headers):"
PART_SEPARATOR = "\n\n\f\n\n"

_REPLAY_PART1 = {
    "en": """
1-1. Design the Google Sheet and the screen interface for the app

From now on you are the best Google Apps Script web app developer on earth!
I want to build a new project called "{project_name}".
The main features and user flow of the app are as follows.

== [App description] start ==
{app_description}
== [App description] end ==

All data will live in a single Google Sheet tab named "{sheet_name}".
To build this, how should the sheet fields and the screen interface be laid out?
Answer briefly, listing the headers in column order.
""",
    "ko": """
1-1. 앱과 연동할 구글시트 및 화면 인터페이스 구성하기

자, 너는 지금부터 지상 최고의 구글 Apps Script 웹 앱 개발자다!
이번에 새로운 프로젝트로 "{project_name}"을 만들려고 해.
앱 주요 기능과 사용자 흐름은 다음과 같아.

== [앱 설명] 시작 ==
{app_description}
== [앱 설명] 끝 ==

데이터는 구글 시트에서 "{sheet_name}" 시트 하나로 관리할 거야.
위와 같이 만들려면, 구글 시트의 필드와 화면 인터페이스는 어떻게 구성하면 좋을까?
머리글 순번으로 간략하게 알려줘.
""",
}

_REPLAY_PART2 = {
    "en": """
1-2. Write the code the app needs

Great. I set things up as you suggested, as shown below.
Let's start developing the web app. Please write code.gs and index.html.

== [Backend configuration] start ===
1. External API
- Gemini API key: {api_key}
- Gemini model: {model}

2. Google Sheet structure
- Google Sheet ID: {sheet_id}
- Sheet name: {sheet_name}
- Fields:
{fields}
== [Backend configuration] end ===

== [Screen interface] start ==
{ui_elements}
== [Screen interface] end ==

== [Environment and extra requests] start ==
- Everything is built with Google Apps Script + HTML/CSS/JS.
- Give it a polished design that follows current trends: {stylish}
- Write responsive CSS so it works on mobile: {responsive}
{other}
== [Environment and extra requests] end ==
""",
    "ko": """
1-2. 앱 제작이 필요한 코드 작성하기

좋아. 너가 알려준 대로 아래와 같이 구성했어.
웹 앱 개발을 시작해보자. code.gs 와 index.html 코드를 각각 작성해줘.

== [백엔드 구성] 시작 ===
1. 사용할 외부 API
- Gemini API 키: {api_key}
- Gemini 모델: {model}

2. 구글 시트 구조
- 구글시트 ID: {sheet_id}
- 시트명: {sheet_name}
- 필드 구조:
{fields}
== [백엔드 구성] 끝 ===

== [화면 인터페이스 구성] 시작 ==
{ui_elements}
== [화면 인터페이스 구성] 끝 ==

== [개발 환경 및 추가 요청] 시작 ==
- 모든 개발은 구글 Apps Script + HTML/CSS/JS 로 진행할거야.
- 최신 트렌드에 맞춰서 세련된 디자인으로 꾸며줘: {stylish}
- 모바일에 대응할 수 있도록 반응형 CSS로 작성해: {responsive}
{other}
== [개발 환경 및 추가 요청] 끝 ==
""",
}

_PLACEHOLDERS = {
    "en": {"api_key": "(API key required)", "sheet_id": "(Google Sheet ID required)"},
    "ko": {"api_key": "(API 키 입력 필요)", "sheet_id": "(구글 시트 ID 입력 필요)"},
}


def build_sheet_structure(request: CodeGenerationRequest) -> str:
    fields = "\n".join(f"- {f}" for f in request.final_sheet_fields)
    return f"{SHEET_NAME_PREFIX}{request.final_sheet_name}\n\n{SHEET_FIELDS_HEADER}\n{fields}"


def parse_sheet_structure(text: str) -> Tuple[str, List[str]]:
    """Inverse of build_sheet_structure. Names and fields are single-line by construction."""
    lines = text.split("\n")
    if not lines or not lines[0].startswith(SHEET_NAME_PREFIX):
        raise ValueError("Not a sheet structure summary: missing sheet name line")
    name = lines[0][len(SHEET_NAME_PREFIX):]
    try:
        start = lines.index(SHEET_FIELDS_HEADER) + 1
    except ValueError:
        raise ValueError("Not a sheet structure summary: missing fields header") from None
    fields = [line[2:] for line in lines[start:] if line.startswith("- ")]
    return name, fields


def build_replay_prompt(request: CodeGenerationRequest, locale: str = DEFAULT_LOCALE) -> str:
    labels = get_labels(locale)
    placeholders = _PLACEHOLDERS[locale]

    part1 = _REPLAY_PART1[locale].format(
        project_name=request.project_name,
        app_description=request.app_description,
        sheet_name=request.final_sheet_name,
    ).strip()

    other = ""
    if request.other_requests.strip():
        other = f"- {labels.other_requests}: {request.other_requests}"

    part2 = _REPLAY_PART2[locale].format(
        api_key=request.target_api_key or placeholders["api_key"],
        model=request.target_model,
        sheet_id=request.target_sheet_id or placeholders["sheet_id"],
        sheet_name=request.final_sheet_name,
        fields="\n".join(f"  - {f}" for f in request.final_sheet_fields),
        ui_elements="\n".join(f"  - {el}" for el in request.final_ui_elements),
        stylish=yes_no(request.apply_stylish_design, labels),
        responsive=yes_no(request.include_responsive_css, labels),
        other=other,
    ).strip()

    return f"{part1}{PART_SEPARATOR}{part2}"


def assemble_artifacts(
    request: CodeGenerationRequest,
    code: Optional[Tuple[str, str]] = None,
    locale: str = DEFAULT_LOCALE,
) -> GeneratedArtifacts:
    code_gs, index_html = code if code is not None else (None, None)
    return GeneratedArtifacts(
        code_gs=code_gs,
        index_html=index_html,
        sheet_structure_txt=build_sheet_structure(request),
        claude_prompt_txt=build_replay_prompt(request, locale),
    )
