import asyncio
import logging

import httpx
import pydantic

from .classes import WordEntry
from .exceptions import EnrichmentUnavailable
from .sentences import SentenceSource

API_BASE = "https://generativelanguage.googleapis.com"
GENERATE_CONTENT = "/v1beta/models/{model}:generateContent"

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "sentence": {
            "type": "STRING",
            "description": "A very simple example sentence for the word.",
        },
    },
    "required": ["sentence"],
}


class _Part(pydantic.BaseModel):
    text: str | None = None


class _Content(pydantic.BaseModel):
    parts: list[_Part] = []


class _Candidate(pydantic.BaseModel):
    content: _Content | None = None


class GenerateContentResponse(pydantic.BaseModel):
    candidates: list[_Candidate] = []

    @property
    def text(self) -> str | None:
        for candidate in self.candidates:
            if candidate.content is None:
                continue
            texts = [part.text for part in candidate.content.parts if part.text]
            if texts:
                return "".join(texts)
        return None


class SentencePayload(pydantic.BaseModel):
    sentence: str


def build_prompt(word: WordEntry) -> str:
    return (f"Generate one very simple, kid-friendly example sentence for the English word: '{word.surface_form}'.\n"
            f"The sentence should be easy for a 5-8 year old to understand.\n"
            f"The word's part of speech is '{word.category}' and its Chinese meaning is '{word.translation}'.")


class GeminiSentenceSource(SentenceSource):
    httpx_client: httpx.AsyncClient
    model: str
    temperature: float
    logger: logging.Logger
    retries: int
    retry_wait: float

    def __init__(
            self,
            api_key: str, /, *,
            model: str = "gemini-2.5-flash",
            temperature: float = 0.8,
            timeout: float | None = 10.0,
            root_logger: logging.Logger = logging.root,
            retries: int = 3,
            retry_wait: float = 2.5,
            transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model = model
        self.temperature = temperature
        self.logger = root_logger.getChild("gemini")
        self.retries = retries
        self.retry_wait = retry_wait
        headers = {
            "x-goog-api-key": api_key,
        }
        self.httpx_client = httpx.AsyncClient(headers=headers, base_url=API_BASE, timeout=timeout,
                                              transport=transport)

    async def __aenter__(self) -> 'GeminiSentenceSource':
        await self.httpx_client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.httpx_client.__aexit__(exc_type, exc_val, exc_tb)

    def request_body(self, word: WordEntry) -> dict:
        return {
            "contents": [
                {"parts": [{"text": build_prompt(word)}]}
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
                "temperature": self.temperature,
                "thinkingConfig": {"thinkingBudget": 0},
            },
        }

    async def generate_sentence(self, word: WordEntry) -> str:
        body = self.request_body(word)
        for _ in range(self.retries):
            r = await self.httpx_client.post(GENERATE_CONTENT.format(model=self.model), json=body)
            if r.is_server_error or (r.is_success and len(r.content) == 0):
                self.logger.warning("Got empty response or server error during sentence request, retrying")
                await asyncio.sleep(self.retry_wait)
                continue
            if r.status_code == 429:
                self.logger.warning("Got rate limited during sentence request, retrying")
                await asyncio.sleep(self.retry_wait)
                continue
            break
        if not r.is_success or len(r.content) == 0:
            raise EnrichmentUnavailable(f"Sentence request failed with status code {r.status_code}")
        try:
            text = GenerateContentResponse.model_validate_json(r.content).text
            if text is None:
                raise EnrichmentUnavailable("Model returned no text")
            sentence = SentencePayload.model_validate_json(text.strip()).sentence.strip()
        except pydantic.ValidationError as e:
            raise EnrichmentUnavailable("Could not parse model response") from e
        if not sentence:
            raise EnrichmentUnavailable("Model returned an empty sentence")
        return sentence

    async def request_example_sentence(self, word: WordEntry) -> str | None:
        try:
            sentence = await self.generate_sentence(word)
        except (EnrichmentUnavailable, httpx.HTTPError) as e:
            self.logger.error(f"Error generating example sentence for '{word.surface_form}': {e}")
            return None
        self.logger.debug(f"Example sentence for '{word.surface_form}': {sentence}")
        return sentence
