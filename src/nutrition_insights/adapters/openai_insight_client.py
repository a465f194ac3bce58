"""OpenAI Responses API client for analytics insights and chat."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_insights.services.insights import InsightClient


@dataclass
class OpenAIInsightClient(InsightClient):
    """Insight client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float) -> "OpenAIInsightClient":
        """Create an OpenAI insight client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def generate_json(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def generate_text(
        self,
        *,
        model: str,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        """Return the model's reply to a conversation."""
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=messages,
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text.strip()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
