"""Google Gemini LLM provider."""

from google import genai
from google.genai import types

from app.core.config import settings
from app.services.llm.base import BaseLLMProvider


class GeminiProvider(BaseLLMProvider):
    name = "gemini"

    def __init__(self, client: genai.Client | None = None, api_key: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = settings.gemini_model
        self._client = client
        self.config = types.GenerateContentConfig(
            temperature=0.7,
            top_p=0.9,
            max_output_tokens=500,
        )

    @property
    def client(self) -> genai.Client:
        # Created lazily: genai.Client refuses to build without a key
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def is_configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    async def generate(self, prompt: str) -> str | None:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self.config,
        )
        return response.text
