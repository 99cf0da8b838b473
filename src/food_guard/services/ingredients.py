"""Ingredient analysis services."""

import re
from dataclasses import dataclass, field
from typing import Protocol

from food_guard.domain.foods import UserProfile
from food_guard.domain.ingredients import HarmfulIngredient, IngredientAnalysis


class IngredientAnalyzer(Protocol):
    """Classifies a raw ingredient list into harmful-ingredient findings."""

    async def analyze(
        self, ingredients_text: str, profile: UserProfile
    ) -> IngredientAnalysis:
        """Return the analysis for an ingredient list."""


@dataclass(frozen=True)
class CatalogueEntry:
    """Known harmful ingredient with aliases and personalized severities."""

    severity: str
    category: str
    risks: tuple[str, ...]
    common_in: tuple[str, ...]
    aliases: tuple[str, ...] = ()
    personalized: dict[str, str] = field(default_factory=dict)


DEFAULT_CATALOGUE: dict[str, CatalogueEntry] = {
    "aspartame": CatalogueEntry(
        severity="high",
        category="artificial_sweetener",
        risks=("headaches", "mood disorders", "potential carcinogen"),
        common_in=("diet sodas", "sugar-free products"),
        aliases=("e951", "nutrasweet"),
        personalized={"pregnancy": "very_high", "diabetes": "medium"},
    ),
    "high fructose corn syrup": CatalogueEntry(
        severity="high",
        category="sweetener",
        risks=("obesity", "diabetes", "liver damage", "metabolic syndrome"),
        common_in=("sodas", "processed foods", "candy"),
        aliases=("hfcs", "corn syrup", "glucose-fructose syrup"),
        personalized={"diabetes": "very_high", "obesity": "very_high"},
    ),
    "monosodium glutamate": CatalogueEntry(
        severity="medium",
        category="flavor_enhancer",
        risks=("headaches", "nausea", "chest pain"),
        common_in=("chips", "instant noodles"),
        aliases=("msg", "e621", "glutamic acid"),
        personalized={"hypertension": "high", "migraine": "very_high"},
    ),
    "partially hydrogenated oil": CatalogueEntry(
        severity="very_high",
        category="trans_fat",
        risks=("heart disease", "stroke", "diabetes", "inflammation"),
        common_in=("baked goods", "margarine", "fried foods"),
        aliases=("trans fat", "hydrogenated oil", "shortening"),
        personalized={
            "heart_disease": "very_high",
            "hypertension": "very_high",
            "diabetes": "high",
        },
    ),
    "sodium nitrite": CatalogueEntry(
        severity="high",
        category="preservative",
        risks=("cancer", "methemoglobinemia", "heart disease"),
        common_in=("processed meats", "bacon", "hot dogs"),
        aliases=("e250", "sodium nitrate", "e251"),
        personalized={"pregnancy": "very_high", "cancer_risk": "very_high"},
    ),
    "bha": CatalogueEntry(
        severity="high",
        category="preservative",
        risks=("potential carcinogen", "hormone disruption", "liver damage"),
        common_in=("cereals", "chips", "butter"),
        aliases=("butylated hydroxyanisole", "e320"),
        personalized={"liver_disease": "high"},
    ),
    "bht": CatalogueEntry(
        severity="high",
        category="preservative",
        risks=("potential carcinogen", "kidney damage", "liver damage"),
        common_in=("cereals", "chewing gum", "potato chips"),
        aliases=("butylated hydroxytoluene", "e321"),
        personalized={"kidney_disease": "very_high", "liver_disease": "high"},
    ),
    "red 40": CatalogueEntry(
        severity="medium",
        category="artificial_color",
        risks=("hyperactivity", "allergies", "potential carcinogen"),
        common_in=("candy", "sodas", "cereals"),
        aliases=("allura red", "e129", "red dye #40"),
        personalized={"adhd": "very_high"},
    ),
    "yellow 5": CatalogueEntry(
        severity="medium",
        category="artificial_color",
        risks=("hyperactivity", "allergies", "asthma"),
        common_in=("candy", "chips", "sodas"),
        aliases=("tartrazine", "e102", "yellow dye #5"),
        personalized={"adhd": "very_high", "asthma": "high"},
    ),
    "carrageenan": CatalogueEntry(
        severity="medium",
        category="thickener",
        risks=("inflammation", "digestive issues"),
        common_in=("dairy alternatives", "deli meats"),
        aliases=("e407", "irish moss"),
        personalized={"ibs": "very_high", "digestive_issues": "high"},
    ),
    "maltodextrin": CatalogueEntry(
        severity="medium",
        category="hidden_sugar",
        risks=("blood sugar spikes", "gut bacteria disruption", "weight gain"),
        common_in=("sports drinks", "snacks"),
        aliases=("corn syrup solids",),
        personalized={"diabetes": "very_high", "obesity": "high"},
    ),
    "dextrose": CatalogueEntry(
        severity="medium",
        category="hidden_sugar",
        risks=("blood sugar spikes", "tooth decay", "obesity"),
        common_in=("processed foods", "baked goods", "lunch meats"),
        aliases=("corn sugar", "glucose", "d-glucose"),
        personalized={"diabetes": "very_high", "obesity": "high"},
    ),
}

ULTRA_PROCESSED_INDICATORS = (
    "modified",
    "enriched",
    "fortified",
    "concentrate",
    "isolate",
    "hydrolyzed",
    "hydrogenated",
    "interesterified",
    "extract",
)

SUGAR_KEYWORDS = ("syrup", "ose", "sugar", "sweetener", "nectar", "honey", "agave")

PRODUCT_ALTERNATIVES = {
    "chips": ["Baked chips", "Air-popped popcorn", "Vegetable chips"],
    "soda": ["Sparkling water", "Fresh juice", "Coconut water"],
    "candy": ["Dark chocolate", "Fresh fruits", "Dried fruits"],
    "noodles": ["Whole wheat pasta", "Rice noodles", "Zucchini noodles"],
    "cookies": ["Oat cookies", "Homemade cookies", "Fruit bars"],
}
GENERIC_ALTERNATIVES = ["Whole foods", "Fresh alternatives", "Homemade versions"]

_SPLIT_PATTERN = re.compile(r"[,;()]")
_E_NUMBER_PATTERN = re.compile(r"^e\d{3}")
_LONG_WORD_LENGTH = 15


@dataclass
class RuleBasedIngredientAnalyzer:
    """In-process analyzer backed by a harmful-ingredient catalogue."""

    catalogue: dict[str, CatalogueEntry] = field(
        default_factory=lambda: dict(DEFAULT_CATALOGUE)
    )

    async def analyze(
        self, ingredients_text: str, profile: UserProfile
    ) -> IngredientAnalysis:
        """Classify an ingredient list for a profile."""
        text = ingredients_text.lower()
        items = [item.strip() for item in _SPLIT_PATTERN.split(text) if item.strip()]

        harmful = [
            self._build_finding(name, entry, profile)
            for name, entry in self.catalogue.items()
            if _mentions(text, (name, *entry.aliases))
        ]
        hidden_sugars = [
            item for item in items if any(word in item for word in SUGAR_KEYWORDS)
        ]
        return IngredientAnalysis(
            harmful_ingredients=harmful,
            processing_level=_processing_level(text, items),
            hidden_sugars=hidden_sugars,
        )

    def _build_finding(
        self, name: str, entry: CatalogueEntry, profile: UserProfile
    ) -> HarmfulIngredient:
        personal = None
        for condition in profile.health_conditions:
            if condition in entry.personalized:
                personal = entry.personalized[condition]
                break
        return HarmfulIngredient(
            name=name,
            severity=entry.severity,
            personal_severity=personal,
            risks=list(entry.risks),
            category=entry.category,
            alternative_products=suggest_alternatives(entry.common_in[0]),
        )


def suggest_alternatives(product_type: str) -> list[str]:
    """Return cleaner product suggestions for a product type."""
    product = product_type.lower()
    for key, alternatives in PRODUCT_ALTERNATIVES.items():
        if key in product:
            return list(alternatives)
    return list(GENERIC_ALTERNATIVES)


def _mentions(text: str, names: tuple[str, ...]) -> bool:
    return any(name in text for name in names)


def _processing_level(text: str, items: list[str]) -> str:
    """Classify processing from indicator words and additive counts."""
    indicator_count = sum(1 for word in ULTRA_PROCESSED_INDICATORS if word in text)
    additive_count = sum(
        1
        for item in items
        if _E_NUMBER_PATTERN.match(item)
        or any(len(word) > _LONG_WORD_LENGTH for word in item.split())
    )
    if indicator_count > 3 or additive_count > 10:  # noqa: PLR2004
        return "ultra_processed"
    if indicator_count > 1 or additive_count > 2:  # noqa: PLR2004
        return "processed"
    if len(items) <= 1 and indicator_count == 0:
        return "unprocessed"
    return "minimally_processed"


INGREDIENT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "harmful_ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "severity": {
                        "type": "string",
                        "enum": ["low", "medium", "high", "very_high"],
                    },
                    "personal_severity": {
                        "anyOf": [
                            {
                                "type": "string",
                                "enum": ["low", "medium", "high", "very_high"],
                            },
                            {"type": "null"},
                        ]
                    },
                    "risks": {"type": "array", "items": {"type": "string"}},
                    "category": {"type": "string"},
                    "alternative_products": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                },
                "required": [
                    "name",
                    "severity",
                    "personal_severity",
                    "risks",
                    "category",
                    "alternative_products",
                ],
                "additionalProperties": False,
            },
        },
        "processing_level": {
            "type": "string",
            "enum": [
                "unprocessed",
                "minimally_processed",
                "processed",
                "ultra_processed",
            ],
        },
        "hidden_sugars": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["harmful_ingredients", "processing_level", "hidden_sugars"],
    "additionalProperties": False,
}


class IngredientLlmClient(Protocol):
    """Interface for LLM-backed structured ingredient classification."""

    async def classify(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured ingredient analysis data."""


@dataclass
class LlmIngredientAnalyzer:
    """Analyzer that prompts an LLM and validates its structured output."""

    client: IngredientLlmClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(
        self, ingredients_text: str, profile: UserProfile
    ) -> IngredientAnalysis:
        """Classify an ingredient list via the configured client."""
        raw = await self.client.classify(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            schema=INGREDIENT_SCHEMA,
            prompt=_build_prompt(ingredients_text, profile),
        )
        return IngredientAnalysis.model_validate(raw)


def _build_prompt(ingredients_text: str, profile: UserProfile) -> str:
    conditions = ", ".join(profile.health_conditions) or "none"
    return (
        "List the harmful additives in this ingredient list. "
        "For each give a severity (low, medium, high, very_high), a personal "
        "severity for the listed health conditions or null, short risk "
        "descriptions, a category and up to three cleaner product suggestions. "
        "Also classify the processing level and list every added or hidden sugar.\n"
        f"Health conditions: {conditions}\n"
        f"Ingredients: {ingredients_text}"
    )
