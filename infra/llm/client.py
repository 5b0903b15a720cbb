import logging
from typing import Dict, List, Optional

import httpx

from app.settings import Settings
from domain.errors import EvaluationError, MissingConfigurationError
from domain.schemas import EvaluationInput
from infra.llm.prompts import (
    CANDIDATE_PROMPT,
    OUTPUT_CONTRACT,
    SCORING_RUBRIC,
    SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)

CV_TEXT_MAX_CHARS = 20_000
NO_ANSWERS = "(no answers)"
NO_CV_TEXT = "(no CV text)"


class LLMEvaluator:
    """Scores a candidate with a single chat-completions call.

    The raw model text is returned untouched; it is untrusted and must go
    through ``domain.coercion.coerce_evaluation`` before use. There is no
    retry here: a failed call raises ``EvaluationError`` and the caller
    decides whether to try the whole scoring request again.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        cv_text_max_chars: int = CV_TEXT_MAX_CHARS,
        temperature: float = 0.2,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise MissingConfigurationError("OPENAI_API_KEY is missing")
        if not model:
            raise MissingConfigurationError("OPENAI_MODEL is missing")
        self.model = model
        self.timeout = timeout
        self.cv_text_max_chars = cv_text_max_chars
        self.temperature = temperature
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "LLMEvaluator":
        return cls(
            settings.OPENAI_API_KEY,
            settings.OPENAI_MODEL,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.LLM_TIMEOUT,
            cv_text_max_chars=settings.CV_TEXT_MAX_CHARS,
            **kwargs,
        )

    def build_messages(
        self, data: EvaluationInput, cv_text: str, answers_text: str
    ) -> List[Dict[str, str]]:
        candidate = CANDIDATE_PROMPT.format(
            candidate_name=data.candidate_name,
            candidate_id=data.candidate_id,
            job_id=data.job_id,
            cv_url=data.cv_url or "(none)",
            cv_text=(cv_text or NO_CV_TEXT)[: self.cv_text_max_chars],
            answers_text=answers_text or NO_ANSWERS,
        )
        content = f"{candidate}\n\n{SCORING_RUBRIC}\n\n{OUTPUT_CONTRACT}"
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": content},
        ]

    async def evaluate(
        self, data: EvaluationInput, cv_text: str, answers_text: str
    ) -> str:
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
            "messages": self.build_messages(data, cv_text, answers_text),
        }
        try:
            response = await self._client.post(
                self._url, headers=self._headers, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            data_json = response.json()
        except httpx.TimeoutException as exc:
            raise EvaluationError(
                f"LLM call timed out after {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            raise EvaluationError(
                f"LLM call failed with status {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            raise EvaluationError(f"LLM call failed: {exc}") from exc
        except ValueError as exc:
            raise EvaluationError("LLM provider returned a non-JSON body") from exc

        try:
            content = data_json["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str):
            logger.warning("LLM returned no content for candidate %s", data.candidate_id)
            return ""
        return content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
