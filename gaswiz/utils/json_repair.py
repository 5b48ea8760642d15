from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 1000
CONTEXT_CHARS = 100

FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL | re.IGNORECASE)
TRAILING_COMMA_RE = re.compile(r",\s*(?=\}$)")


class JsonExtractionError(ValueError):
    def __init__(self, message: str, text: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.text = text
        self.position = position


@dataclass(frozen=True)
class RepairRule:
    name: str
    apply: Callable[[str], str]


def trim_whitespace(text: str) -> str:
    return text.strip()


def strip_code_fence(text: str) -> str:
    """
    Unwrap a response that is entirely wrapped in a ``` fence.

    The fence may carry a `json` tag. Text with only a partial fence, or
    with prose around the fence, is returned untouched.
    """
    match = FENCE_RE.match(text)
    if match and match.group(1):
        return match.group(1).strip()
    return text


def unescape_dollar(text: str) -> str:
    # Gemini sometimes escapes `$` as if it were template syntax
    return text.replace("\\$", "$")


def strip_trailing_comma(text: str) -> str:
    """
    Drop a comma sitting right before the final closing brace.

    Only the brace at the very end of the string is considered. Commas
    before nested braces or brackets are left alone, so anything else
    malformed still fails to parse.
    """
    return TRAILING_COMMA_RE.sub("", text)


REPAIR_RULES: Tuple[RepairRule, ...] = (
    RepairRule("trim_whitespace", trim_whitespace),
    RepairRule("strip_code_fence", strip_code_fence),
    RepairRule("unescape_dollar", unescape_dollar),
    RepairRule("strip_trailing_comma", strip_trailing_comma),
)


def repair(text: str) -> str:
    for rule in REPAIR_RULES:
        repaired = rule.apply(text)
        if repaired != text:
            logger.debug("json_repair: rule %s changed the response", rule.name)
        text = repaired
    return text


def extract_json(raw_text: str) -> Any:
    """
    Parse a model response as JSON after the syntactic repairs above.

    Raises:
        JsonExtractionError: if the repaired text is still not valid JSON.
            The message holds the start of the text and, when the decoder
            reports one, the text around the failing position.
    """
    text = repair(raw_text or "")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        start = max(0, exc.pos - CONTEXT_CHARS)
        end = min(len(text), exc.pos + CONTEXT_CHARS)
        context = f' Context around error (pos {exc.pos}): "...{text[start:end]}..."'
        logger.error(
            "Failed to parse model response as JSON (%d chars): %s", len(text), exc.msg
        )
        raise JsonExtractionError(
            "Model response is not valid JSON even after repair. "
            f"Response starts with: {text[:PREVIEW_CHARS]}{context}",
            text=text,
            position=exc.pos,
        ) from exc
