"""OpenAI Responses API client for the household assistant."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from homelife.domain.errors import ExternalDependencyError
from homelife.services.assistant import AssistantClient


@dataclass
class OpenAIAssistantClient(AssistantClient):
    """Assistant client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float = 20.0) -> "OpenAIAssistantClient":
        """Create an OpenAI assistant client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def complete(self, *, model: str, instructions: str, prompt: str) -> str:
        """Return the text output for a prompt."""
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=prompt,
            store=False,
        )
        return response.output_text or ""

    async def complete_json(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=prompt,
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
            raise ExternalDependencyError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
