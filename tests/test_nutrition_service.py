"""Tests for food database normalization and the nutrition service."""

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest

from macro_planner.services.cache import InMemoryCache
from macro_planner.services.nutrition import (
    NutritionService,
    format_food_record,
    normalize_nutrient_source,
    serving_grams,
)
from tests.conftest import FakeFdcClient, paneer_payload


def _label_payload(
    serving_size: object, unit: str, label: dict[str, float]
) -> dict[str, object]:
    return {
        "fdcId": 1,
        "description": "LABEL FOOD",
        "servingSize": serving_size,
        "servingSizeUnit": unit,
        "foodNutrients": [],
        "labelNutrients": {key: {"value": value} for key, value in label.items()},
    }


def test_per_100g_nutrients_are_used_directly() -> None:
    nutrition = normalize_nutrient_source(paneer_payload())

    assert nutrition.calories == 321
    assert nutrition.protein == 25
    assert nutrition.carbs == 3.6
    assert nutrition.fat == 25
    assert nutrition.fiber == 0
    assert nutrition.minerals == {"calcium": 0, "iron": 0, "potassium": 0}


def test_label_nutrients_are_converted_to_100g() -> None:
    payload = _label_payload(
        28, "g", {"calories": 89.9, "protein": 7, "carbohydrates": 1, "fat": 7}
    )

    nutrition = normalize_nutrient_source(payload)

    assert nutrition.calories == 321.1
    assert nutrition.protein == 25.0
    assert nutrition.carbs == 3.6
    assert nutrition.fat == 25.0


def test_label_in_ounces_is_converted() -> None:
    payload = _label_payload(1, "oz", {"calories": 28.3495, "sodium": 56.699})

    nutrition = normalize_nutrient_source(payload)

    assert nutrition.calories == 100
    assert nutrition.sodium == 200


def test_label_near_100_grams_is_not_converted() -> None:
    payload = _label_payload(100.3, "g", {"calories": 50, "protein": 3.33})

    nutrition = normalize_nutrient_source(payload)

    assert nutrition.calories == 50
    assert nutrition.protein == 3.3


def test_unknown_serving_unit_counts_as_grams() -> None:
    payload = _label_payload(50, "cup", {"calories": 100})

    assert normalize_nutrient_source(payload).calories == 200


def test_missing_serving_size_leaves_label_values() -> None:
    payload = _label_payload(None, "g", {"calories": 75, "iron": 1.25})

    nutrition = normalize_nutrient_source(payload)

    assert nutrition.calories == 75
    assert nutrition.minerals["iron"] == 1.3


def test_alternate_calorie_ids_take_first_positive() -> None:
    payload = {
        "foodNutrients": [
            {"nutrientId": 1008, "value": 0},
            {"nutrientId": 2047, "value": 152.4},
            {"nutrientId": 2048, "value": 160},
            {"nutrientId": 2000, "value": 4.44},
        ]
    }

    nutrition = normalize_nutrient_source(payload)

    assert nutrition.calories == 152.4
    assert nutrition.sugar == 4.4


def test_value_key_wins_over_amount() -> None:
    payload = {
        "foodNutrients": [
            {"nutrientId": 1003, "value": 10, "amount": 99},
            {"nutrient": {"id": 1087}, "amount": "120"},
        ]
    }

    nutrition = normalize_nutrient_source(payload)

    assert nutrition.protein == 10
    assert nutrition.minerals["calcium"] == 120


def test_any_positive_per_100g_value_skips_label() -> None:
    payload = {
        "servingSize": 50,
        "servingSizeUnit": "g",
        "foodNutrients": [{"nutrientId": 1008, "value": 40}],
        "labelNutrients": {"protein": {"value": 10}},
    }

    nutrition = normalize_nutrient_source(payload)

    assert nutrition.calories == 40
    assert nutrition.protein == 0


def test_malformed_payload_yields_zeros() -> None:
    payload = {
        "foodNutrients": "bad",
        "labelNutrients": ["bad"],
        "servingSize": "n/a",
    }

    nutrition = normalize_nutrient_source(payload)

    assert (nutrition.calories, nutrition.protein, nutrition.carbs) == (0, 0, 0)
    assert normalize_nutrient_source({}).fat == 0


def test_normalizing_normalized_output_is_stable() -> None:
    first = normalize_nutrient_source(
        _label_payload(
            28,
            "g",
            {"calories": 89.9, "protein": 7, "carbohydrates": 1, "fat": 7, "sugars": 0.3},
        )
    )
    label = {
        "calories": first.calories,
        "protein": first.protein,
        "carbohydrates": first.carbs,
        "fat": first.fat,
        "sugars": first.sugar or 0,
    }

    second = normalize_nutrient_source(_label_payload(100, "g", label))

    assert second == first


def test_format_food_record() -> None:
    record = format_food_record(paneer_payload())

    assert record.fdc_id == 2429587
    assert record.name == "Paneer"
    assert record.brand == "Nanak Foods"
    assert record.data_type == "Branded"
    assert record.household_serving == "1 oz"
    assert record.serving_size == 100
    assert record.serving_size_unit == "g"


def test_format_food_record_fallbacks() -> None:
    record = format_food_record(
        {"fdcId": 7, "description": "", "brandName": "Acme", "brandOwner": "Owner"}
    )

    assert record.name == "Unknown"
    assert record.brand == "Acme"
    assert record.household_serving is None


def test_format_food_record_title_cases_words() -> None:
    record = format_food_record({"description": "CHEESE, CHEDDAR (sharp)"})

    assert record.name == "Cheese, Cheddar (Sharp)"


def test_serving_grams() -> None:
    assert serving_grams(2, "LB") == pytest.approx(907.184)
    assert serving_grams(0.5, "kg") == 500
    assert serving_grams(30, "") == 30


def test_search_normalizes_and_caches(fdc_client: FakeFdcClient) -> None:
    service = NutritionService(fdc_client=fdc_client, cache=InMemoryCache())

    first = asyncio.run(service.search("Paneer"))
    second = asyncio.run(service.search("paneer"))

    assert first == second
    assert fdc_client.search_calls == 1
    assert first.total_pages == 1
    assert first.foods[0].nutrition.calories == 321


def test_search_cache_is_keyed_by_page(fdc_client: FakeFdcClient) -> None:
    service = NutritionService(fdc_client=fdc_client, cache=InMemoryCache())

    asyncio.run(service.search("paneer", page=1))
    asyncio.run(service.search("paneer", page=2))

    assert fdc_client.search_calls == 2


def test_get_food_caches(fdc_client: FakeFdcClient) -> None:
    service = NutritionService(fdc_client=fdc_client, cache=InMemoryCache())

    asyncio.run(service.get_food(2429587))
    record = asyncio.run(service.get_food(2429587))

    assert fdc_client.food_calls == 1
    assert record.name == "Paneer"


@dataclass
class FlakyFdcClient(FakeFdcClient):
    """Fails a fixed number of times before answering."""

    failures: int = 1
    errors: list[Exception] = field(default_factory=list)

    async def search_foods(
        self, query: str, page_number: int = 1, page_size: int = 20
    ) -> dict[str, object]:
        self.search_calls += 1
        if self.failures > 0:
            self.failures -= 1
            request = httpx.Request("GET", "https://fdc.test/foods/search")
            response = httpx.Response(503, request=request)
            raise httpx.HTTPStatusError("boom", request=request, response=response)
        return self.search_payload


def test_search_retries_once() -> None:
    client = FlakyFdcClient(failures=1)
    service = NutritionService(
        fdc_client=client, cache=InMemoryCache(), retry_delay_seconds=0
    )

    result = asyncio.run(service.search("paneer"))

    assert client.search_calls == 2
    assert result.foods[0].name == "Paneer"


def test_search_raises_after_retries() -> None:
    client = FlakyFdcClient(failures=2)
    service = NutritionService(
        fdc_client=client, cache=InMemoryCache(), retry_delay_seconds=0
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(service.search("paneer"))
    assert client.search_calls == 2
