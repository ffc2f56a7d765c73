"""
LLM API Client - the Completion Gateway.

The provider (Groq by default) speaks the OpenAI chat-completions API, so we
use the openai library with a custom base_url.

CONTRACT:
- Input: system instruction + user content for one query type
- Output: a JSON object with the keys that query type requires
- Transport/API failures -> GatewayError
- Empty, non-JSON or wrongly shaped answers -> MalformedResponse
Neither is retried here; the caller decides what the user sees.
"""
import json
import logging
from typing import Optional

from openai import OpenAI, APIConnectionError, APIStatusError, APIError

from career_ai.core.config import Settings, get_settings
from career_ai.core.errors import GatewayError, MalformedResponse
from career_ai.schemas.schemas import QueryType
from career_ai.services.prompt_templates import REQUIRED_KEYS

logger = logging.getLogger(__name__)


def extract_json(text: str) -> dict:
    """
    Parse the model's answer as a JSON object.
    Handles cases where the model wraps JSON in markdown code blocks.
    """
    text = (text or "").strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        data = json.loads(text)
    except ValueError as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}", raw_content=text) from e
    if not isinstance(data, dict):
        raise MalformedResponse("Response JSON is not an object", raw_content=text)
    return data


def check_shape(kind: QueryType, data: dict) -> dict:
    """Make sure the keys the front-end renders are there with the right type."""
    for key, expected in REQUIRED_KEYS[QueryType(kind)].items():
        if not isinstance(data.get(key), expected):
            raise MalformedResponse(
                f"Missing or invalid '{key}' for {QueryType(kind).value} response",
                raw_content=json.dumps(data, ensure_ascii=False)
            )
    return data


class LLMClient:
    """
    Wrapper for the chat-completions API with JSON output.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.model = self.settings.llm_model
        self.provider = self.settings.llm_provider
        self._client: Optional[OpenAI] = None

    @property
    def client(self) -> OpenAI:
        if not self.settings.llm_api_key:
            raise GatewayError("AI service not configured. Please set LLM_API_KEY.")
        if self._client is None:
            self._client = OpenAI(
                api_key=self.settings.llm_api_key,
                base_url=self.settings.llm_base_url,
                timeout=self.settings.llm_timeout_seconds,
                max_retries=0
            )
        return self._client

    def _call_api(self, system_prompt: str, user_content: str) -> str:
        """
        Internal method to call the API.
        Returns raw text response.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                temperature=self.settings.llm_temperature,
                max_tokens=self.settings.llm_max_tokens,
                response_format={"type": "json_object"}
            )
        except APIStatusError as e:
            raise GatewayError(f"LLM API returned {e.status_code}: {e.message}", status_code=e.status_code) from e
        except APIConnectionError as e:
            raise GatewayError(f"LLM API unreachable: {e}") from e
        except APIError as e:
            raise GatewayError(f"LLM API error: {e}") from e

        if not response.choices:
            raise MalformedResponse("No choices in LLM response")
        content = response.choices[0].message.content
        if not content:
            raise MalformedResponse("No content in LLM response")
        return content

    def complete_json(self, system_prompt: str, user_content: str, kind: QueryType) -> dict:
        """Run one completion and return the validated JSON payload."""
        content = self._call_api(system_prompt, user_content)
        return check_shape(kind, extract_json(content))

    def test_connection(self) -> bool:
        """Test if the LLM API is reachable"""
        try:
            content = self._call_api(
                "You are a test assistant. Reply with a JSON object.",
                'Reply with exactly: {"status": "OK"}'
            )
            return "OK" in content.upper()
        except (GatewayError, MalformedResponse) as e:
            logger.warning("LLM connection failed: %s", e)
            return False


# Singleton instance
_llm_client: LLMClient = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client (singleton pattern)"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
