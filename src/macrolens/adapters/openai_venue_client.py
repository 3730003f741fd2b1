"""OpenAI Responses API client for grounded venue search."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from macrolens.domain.errors import ProviderUnavailableError
from macrolens.domain.venues import Location
from macrolens.services.planner import ProviderReply, VenueSearchClient


@dataclass
class OpenAIVenueClient(VenueSearchClient):
    """Venue search client using the OpenAI web search tool."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIVenueClient":
        """Create an OpenAI venue search client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def search(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        prompt: str,
        location: Location | None,
        schema: dict[str, object] | None,
    ) -> ProviderReply:
        """Call OpenAI with web search and collect citation URLs."""
        text = prompt
        if location is not None:
            text = (
                f"{prompt}\n\nThe user is near latitude {location.latitude}, "
                f"longitude {location.longitude}. Prefer venues close to them."
            )
        request_payload: dict[str, object] = {
            "model": model,
            "input": text,
            "tools": [{"type": "web_search"}],
            "store": store,
        }
        if schema is not None:
            request_payload["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "venue_plan",
                    "strict": True,
                    "schema": schema,
                }
            }

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise ProviderUnavailableError(details=str(exc)) from exc
        return ProviderReply(
            text=response.output_text or "",
            references=_citation_urls(response.output),
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()


def _citation_urls(output: list[object] | None) -> list[str]:
    """Return url_citation URLs in output order, first occurrence only."""
    urls: list[str] = []
    for item in output or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for annotation in getattr(part, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                url = getattr(annotation, "url", None)
                if url and url not in urls:
                    urls.append(url)
    return urls
