"""Models for ingredient analysis results."""

from typing import Literal

from pydantic import BaseModel, Field

IngredientSeverity = Literal["low", "medium", "high", "very_high"]
ProcessingLevel = Literal[
    "unprocessed", "minimally_processed", "processed", "ultra_processed"
]


class HarmfulIngredient(BaseModel):
    """Single harmful ingredient found in an ingredient list."""

    name: str
    severity: IngredientSeverity
    personal_severity: IngredientSeverity | None = None
    risks: list[str] = Field(default_factory=list)
    category: str
    alternative_products: list[str] = Field(default_factory=list)


class IngredientAnalysis(BaseModel):
    """Structured output of an ingredient analyzer."""

    harmful_ingredients: list[HarmfulIngredient] = Field(default_factory=list)
    processing_level: ProcessingLevel = "minimally_processed"
    hidden_sugars: list[str] = Field(default_factory=list)
