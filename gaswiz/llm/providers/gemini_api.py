from typing import Any, Dict, Optional

from google import genai

JSON_MIME_TYPE = "application/json"


class GeminiProvider:
    """
    Gemini Developer API via Google Gen AI SDK (google-genai).
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        if not api_key or not api_key.strip():
            raise ValueError("Gemini API key is empty")

        # This client uses the Gemini Developer API when given an API key.
        self.client = genai.Client(api_key=api_key)
        self.model = model
        self.name = f"gemini:{model}"

    def generate(
        self,
        content: str,
        *,
        system_instruction: str,
        response_format: str = "text",
        model: Optional[str] = None,
    ) -> str:
        config: Dict[str, Any] = {"system_instruction": system_instruction}
        if response_format == "json":
            config["response_mime_type"] = JSON_MIME_TYPE

        resp = self.client.models.generate_content(
            model=model or self.model,
            contents=content,
            config=config,
        )
        return resp.text or ""
