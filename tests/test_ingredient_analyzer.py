"""Tests for ingredient analyzers."""

import asyncio
from dataclasses import dataclass, field

from food_guard.domain.foods import UserProfile
from food_guard.services.ingredients import (
    INGREDIENT_SCHEMA,
    IngredientLlmClient,
    LlmIngredientAnalyzer,
    RuleBasedIngredientAnalyzer,
    suggest_alternatives,
)


def test_rule_based_analyzer_personalizes_severity() -> None:
    analyzer = RuleBasedIngredientAnalyzer()
    profile = UserProfile(user_id="u1", health_conditions=("diabetes",))

    analysis = asyncio.run(
        analyzer.analyze("Water, High Fructose Corn Syrup, Salt", profile)
    )

    names = [item.name for item in analysis.harmful_ingredients]
    assert names == ["high fructose corn syrup"]
    finding = analysis.harmful_ingredients[0]
    assert finding.severity == "high"
    assert finding.personal_severity == "very_high"
    assert finding.alternative_products == suggest_alternatives("sodas")


def test_rule_based_analyzer_matches_aliases() -> None:
    analyzer = RuleBasedIngredientAnalyzer()

    analysis = asyncio.run(
        analyzer.analyze("sugar, E621, tartrazine", UserProfile(user_id="u1"))
    )

    names = {item.name for item in analysis.harmful_ingredients}
    assert names == {"monosodium glutamate", "yellow 5"}
    assert all(item.personal_severity is None for item in analysis.harmful_ingredients)


def test_rule_based_analyzer_flags_ultra_processing_and_sugars() -> None:
    analyzer = RuleBasedIngredientAnalyzer()
    ingredients = (
        "enriched flour, sugar, corn syrup, dextrose, fructose, "
        "modified corn starch, soy protein isolate, hydrolyzed whey, "
        "natural flavor (yeast extract)"
    )

    analysis = asyncio.run(analyzer.analyze(ingredients, UserProfile(user_id="u1")))

    assert analysis.processing_level == "ultra_processed"
    assert analysis.hidden_sugars == ["sugar", "corn syrup", "dextrose", "fructose"]


def test_rule_based_analyzer_single_ingredient_is_unprocessed() -> None:
    analysis = asyncio.run(
        RuleBasedIngredientAnalyzer().analyze("rolled oats", UserProfile(user_id="u1"))
    )

    assert analysis.processing_level == "unprocessed"
    assert analysis.harmful_ingredients == []


def test_suggest_alternatives_falls_back_to_generic() -> None:
    assert suggest_alternatives("potato chips")[0] == "Baked chips"
    assert suggest_alternatives("margarine") == [
        "Whole foods",
        "Fresh alternatives",
        "Homemade versions",
    ]


@dataclass
class FakeIngredientLlmClient(IngredientLlmClient):
    payload: dict[str, object] = field(
        default_factory=lambda: {
            "harmful_ingredients": [
                {
                    "name": "sodium nitrite",
                    "severity": "high",
                    "personal_severity": None,
                    "risks": ["cancer"],
                    "category": "preservative",
                    "alternative_products": ["Fresh grilled chicken"],
                }
            ],
            "processing_level": "processed",
            "hidden_sugars": [],
        }
    )
    prompts: list[str] = field(default_factory=list)

    async def classify(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        assert schema is INGREDIENT_SCHEMA
        self.prompts.append(prompt)
        return self.payload


def test_llm_analyzer_validates_structured_output() -> None:
    client = FakeIngredientLlmClient()
    analyzer = LlmIngredientAnalyzer(
        client=client, model="gpt-5.2", reasoning_effort="low", store=False
    )
    profile = UserProfile(user_id="u1", health_conditions=("pregnancy",))

    analysis = asyncio.run(analyzer.analyze("pork, salt, sodium nitrite", profile))

    assert analysis.harmful_ingredients[0].name == "sodium nitrite"
    assert analysis.processing_level == "processed"
    assert "pregnancy" in client.prompts[0]
    assert "sodium nitrite" in client.prompts[0]


def test_rule_based_analyzer_flags_plain_glucose() -> None:
    analysis = asyncio.run(
        RuleBasedIngredientAnalyzer().analyze(
            "water, glucose, salt", UserProfile(user_id="u1")
        )
    )

    assert [item.name for item in analysis.harmful_ingredients] == ["dextrose"]
