"""OpenAI Responses API client for food photo analysis."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from macrolens.domain.errors import ProviderUnavailableError
from macrolens.services.food import FoodAnalysisClient


@dataclass
class OpenAIFoodClient(FoodAnalysisClient):
    """Food analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIFoodClient":
        """Create an OpenAI food analysis client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        prompt: str,
        schema: dict[str, object] | None,
    ) -> str:
        """Call OpenAI with the image and return the raw output text."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_image", "image_url": image_data_url},
                        {"type": "input_text", "text": prompt},
                    ],
                }
            ],
            "store": store,
        }
        if schema is not None:
            request_payload["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "food_analysis",
                    "strict": True,
                    "schema": schema,
                }
            }

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise ProviderUnavailableError(details=str(exc)) from exc
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
