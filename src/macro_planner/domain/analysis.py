"""Models for photo analysis results returned by the vision service."""

from pydantic import BaseModel, Field, field_validator

from macro_planner.domain.nutrition import to_amount


class AnalyzedFood(BaseModel):
    """Single food estimated from a meal photo."""

    name: str = "Unknown food"
    quantity: str = "1 serving"
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    vitamins: dict[str, float] = Field(default_factory=dict)
    minerals: dict[str, float] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: object) -> str:
        return str(value) if value else "Unknown food"

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, value: object) -> str:
        return str(value) if value else "1 serving"

    @field_validator(
        "calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium",
        mode="before",
    )
    @classmethod
    def _amount(cls, value: object) -> float:
        return to_amount(value)

    @field_validator("vitamins", "minerals", mode="before")
    @classmethod
    def _amount_map(cls, value: object) -> dict[str, float]:
        if not isinstance(value, dict):
            return {}
        return {str(key): to_amount(amount) for key, amount in value.items()}


class AnalysisPayload(BaseModel):
    """Raw structured output of a photo analysis."""

    foods: list[AnalyzedFood] = Field(default_factory=list)
    confidence: float | None = None
    notes: str | None = None

    @field_validator("foods", mode="before")
    @classmethod
    def _list_or_empty(cls, value: object) -> object:
        if not isinstance(value, list):
            return []
        return [item if isinstance(item, dict) else {} for item in value]

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: object) -> str | None:
        return str(value) if value else None

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, value: object) -> float | None:
        if value is None:
            return None
        return min(to_amount(value), 1.0)
