"""
Completion client for MCQ generation.

The chat-completion call sits behind ``CompletionProvider`` so the HTTP layer
and the tests can swap the hosted API for a fake. The default provider talks to
any OpenAI-compatible endpoint (Groq unless API_BASE_URL says otherwise).
"""

import logging
from typing import Optional, Protocol

import httpx
import openai
from openai import AsyncOpenAI

from config import Settings
from errors import CompletionError, EmptyResponseError, UnexpectedShapeError, UpstreamProxyError
from prompts import SYSTEM_PROMPT, build_mcq_prompt
from utils import extract_questions, parse_content, validate_mcq

log = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 2000


class CompletionProvider(Protocol):
    async def generate(self, prompt: str):
        """Return the raw message content of the single completion choice."""
        ...


class OpenAICompletionProvider:
    def __init__(self, settings: Settings):
        self.model = settings.model
        self._client = AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.api_base_url,
            timeout=settings.completion_timeout,
            max_retries=0,
        )

    async def generate(self, prompt: str):
        log.info("Using model: %s", self.model)
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            status = getattr(e, "status_code", None)
            log.error("completion request failed (status=%s): %s", status, e)
            raise CompletionError(str(e)) from e

        if not response.choices:
            return None
        return response.choices[0].message.content


async def generate_mcqs(text: str, provider: CompletionProvider, strict: bool = False) -> list:
    """
    Ask the provider for 15 MCQs about ``text`` and return the question list.

    The content must decode to ``{"questions": [...]}`` or a bare array. Items
    are passed through untouched unless ``strict`` is set, in which case each
    one must have a question, exactly 4 options and an in-range correctAnswer.
    """
    prompt = build_mcq_prompt(text)
    content = await provider.generate(prompt)
    if not content:
        raise EmptyResponseError("Empty response from completion API")

    questions = extract_questions(parse_content(content))

    if strict:
        for i, q in enumerate(questions):
            err = validate_mcq(q)
            if err:
                raise UnexpectedShapeError(f"question {i + 1}: {err}")

    return questions


async def list_models(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> list:
    url = f"{settings.api_base_url}/models"
    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }
    try:
        async with httpx.AsyncClient(timeout=30.0, transport=transport) as client:
            r = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        log.error("Error fetching models: %s", e)
        raise UpstreamProxyError(502, {"ok": False, "error": str(e)}) from e

    try:
        data = r.json()
    except ValueError as e:
        if not r.is_error:
            log.error("List models returned a non-JSON body: %s", e)
            raise UpstreamProxyError(502, {"ok": False, "error": f"Invalid JSON from models endpoint: {e}"}) from e
        data = None

    if r.is_error:
        log.error("List models failed %s %s", r.status_code, data)
        raise UpstreamProxyError(r.status_code, {"ok": False, "status": r.status_code, "data": data})

    if data is None:
        raise UpstreamProxyError(502, {"ok": False, "error": "Empty body from models endpoint"})

    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data
