"""AI assistant prompts with graceful degradation."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as SchemaError

from homelife.domain.assistant import RecipeIdea, RecipeIdeas, SubstitutionIdeas

_logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful household food management assistant. "
    "Provide friendly, actionable advice."
)

RECIPE_IDEAS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "ingredients": {"type": "array", "items": {"type": "string"}},
                    "instructions": {"type": "string"},
                    "missing_ingredients": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                    "prep_time": {
                        "anyOf": [{"type": "integer", "minimum": 0}, {"type": "null"}]
                    },
                },
                "required": [
                    "title",
                    "ingredients",
                    "instructions",
                    "missing_ingredients",
                    "prep_time",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["suggestions"],
    "additionalProperties": False,
}

SUBSTITUTIONS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "substitutions": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["substitutions"],
    "additionalProperties": False,
}


class AssistantClient(Protocol):
    """Interface for a text generation provider."""

    async def complete(self, *, model: str, instructions: str, prompt: str) -> str:
        """Return free-form text for a prompt."""

    async def complete_json(
        self,
        *,
        model: str,
        instructions: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return structured output matching ``schema``."""


@dataclass
class AssistantService:
    """Prompts the assistant and turns every failure into an empty answer."""

    client: AssistantClient | None
    model: str

    @property
    def enabled(self) -> bool:
        """Return whether an assistant client is configured."""
        return self.client is not None

    async def summarize_week(  # noqa: PLR0913
        self,
        *,
        total_spend: float,
        waste_count: int,
        meals_planned: int,
        expiring_count: int,
        expiring_names: list[str],
    ) -> str | None:
        """Return a short weekly summary, or None when unavailable."""
        if self.client is None:
            return None
        prompt = (
            "Generate a brief weekly summary (2-3 sentences) for a household that:\n"
            f"- Spent ${total_spend:.2f} on groceries\n"
            f"- Wasted {waste_count} expired items\n"
            f"- Planned {meals_planned} meals\n"
            f"- Has {expiring_count} items expiring soon: "
            f"{', '.join(expiring_names[:5]) or 'none'}\n\n"
            "Make it friendly, encouraging, and include one actionable tip."
        )
        try:
            text = await self.client.complete(
                model=self.model, instructions=SYSTEM_PROMPT, prompt=prompt
            )
        except Exception:
            _logger.exception("Assistant weekly summary failed")
            return None
        return text.strip() or None

    async def suggest_recipes(
        self, pantry_items: list[str], limit: int = 5
    ) -> list[RecipeIdea]:
        """Propose recipes that mostly use what is in the pantry."""
        if self.client is None or not pantry_items:
            return []
        prompt = (
            f"Suggest up to {limit} recipes that can be cooked mostly with these "
            f"pantry items: {', '.join(pantry_items)}. "
            "List any ingredients that would still need to be bought."
        )
        try:
            raw = await self.client.complete_json(
                model=self.model,
                instructions=SYSTEM_PROMPT,
                prompt=prompt,
                schema_name="recipe_ideas",
                schema=RECIPE_IDEAS_SCHEMA,
            )
            ideas = RecipeIdeas.model_validate(raw)
        except SchemaError:
            _logger.warning("Assistant returned malformed recipe suggestions")
            return []
        except Exception:
            _logger.exception("Assistant recipe suggestions failed")
            return []
        return ideas.suggestions[:limit]

    async def suggest_substitutions(
        self, ingredient_name: str, pantry_items: list[str] | None = None
    ) -> list[str]:
        """Return replacements for an ingredient, preferring pantry items."""
        if self.client is None:
            return []
        prompt = f"Suggest up to 3 cooking substitutions for {ingredient_name}."
        if pantry_items:
            prompt += f" Prefer items from this pantry: {', '.join(pantry_items)}."
        try:
            raw = await self.client.complete_json(
                model=self.model,
                instructions=SYSTEM_PROMPT,
                prompt=prompt,
                schema_name="substitutions",
                schema=SUBSTITUTIONS_SCHEMA,
            )
            ideas = SubstitutionIdeas.model_validate(raw)
        except SchemaError:
            _logger.warning("Assistant returned malformed substitutions")
            return []
        except Exception:
            _logger.exception("Assistant substitutions failed")
            return []
        return [value.strip() for value in ideas.substitutions if value.strip()]
