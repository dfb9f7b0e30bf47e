import pytest

from recipe_ai_core.db.store import SqlRecipeStore
from recipe_ai_core.domain_models import NutritionFacts, Recipe
from recipe_ai_core.engine import extract_recipe, run_scan_pipeline
from recipe_ai_core.errors import (
    InvalidInput,
    MalformedResponse,
    RateLimited,
    UpstreamUnavailable,
)
from recipe_ai_core.fingerprint import hash_bytes

IMAGE = b"\x89PNG fake image bytes"

CHICKEN_SOUP = {
    "recipe_name": "CHICKEN SOUP",
    "ingredients": [{"item": "chicken"}],
    "instructions": ["Boil it"],
    "nutrition": None,
}

FULL_NUTRITION = {
    "recipe_name": "Pancakes",
    "servings": 4,
    "ingredients": [{"quantity": "2", "unit": "cups", "item": "flour", "notes": ""}],
    "instructions": [{"step_number": 1, "text": "Mix"}],
    "nutrition": {"calories": 350, "protein_g": 8, "fat_g": 12, "carbs_g": 50},
}


def test_chicken_soup_end_to_end(fake_service_factory):
    service = fake_service_factory(
        extraction=CHICKEN_SOUP,
        nutrition={"calories": 250, "protein_g": 20, "fat_g": 8, "carbs_g": 15},
    )

    recipe = extract_recipe(IMAGE, "image/png", service=service)

    assert recipe.recipe_name == "Chicken Soup"
    assert recipe.ingredients[0].item == "chicken"
    assert recipe.instructions[0].step_number == 1
    assert recipe.nutrition == NutritionFacts(calories=250, protein_g=20, fat_g=8, carbs_g=15)
    assert recipe.nutrition_ai_estimated is True
    assert recipe.nutrition_servings_used == 4

    # Se pidieron los cuatro campos
    prompt = service.text_calls[0]
    for field_name in ["calories", "protein_g", "fat_g", "carbs_g"]:
        assert f'"{field_name}": number' in prompt


def test_complete_nutrition_skips_estimation(fake_service_factory):
    service = fake_service_factory(extraction=FULL_NUTRITION)

    recipe = extract_recipe(IMAGE, "image/jpeg", service=service)

    assert service.text_calls == []
    assert recipe.nutrition == NutritionFacts(calories=350, protein_g=8, fat_g=12, carbs_g=50)
    assert recipe.nutrition_ai_estimated is False
    assert recipe.nutrition_servings_used is None


def test_partial_nutrition_is_merged(fake_service_factory):
    data = dict(FULL_NUTRITION, servings="4-6", nutrition={"calories": 350})
    service = fake_service_factory(
        extraction=data,
        nutrition={"calories": 999, "protein_g": 9, "fat_g": 11, "carbs_g": 48},
    )

    recipe = extract_recipe(IMAGE, "image/webp", service=service)

    assert recipe.nutrition == NutritionFacts(calories=350, protein_g=9, fat_g=11, carbs_g=48)
    assert recipe.nutrition_ai_estimated is True
    assert recipe.nutrition_servings_used == 5
    # El rango no se escribe de vuelta en la receta
    assert recipe.servings is None
    assert '"calories": number' not in service.text_calls[0]


def test_secondary_rate_limit_keeps_primary_extraction(fake_service_factory):
    service = fake_service_factory(
        extraction=CHICKEN_SOUP,
        nutrition=RateLimited("Cuota de la API excedida."),
    )

    recipe = extract_recipe(IMAGE, "image/png", service=service)

    assert recipe.recipe_name == "Chicken Soup"
    assert recipe.nutrition_ai_estimated is False
    assert recipe.nutrition_servings_used is None
    assert recipe.nutrition == NutritionFacts()


@pytest.mark.parametrize(
    "error",
    [
        RateLimited("Cuota de la API excedida.", retry_after="30"),
        UpstreamUnavailable("Error de la API de OpenAI: 503", status_code=503),
    ],
)
def test_primary_failures_propagate(fake_service_factory, error):
    service = fake_service_factory(extraction=error)

    with pytest.raises(type(error)):
        extract_recipe(IMAGE, "application/pdf", service=service)
    assert service.text_calls == []


def test_malformed_primary_response_propagates(fake_service_factory):
    service = fake_service_factory(extraction="Sorry, I can't read this image.")

    with pytest.raises(MalformedResponse):
        extract_recipe(IMAGE, "image/png", service=service)


def test_truncated_primary_response_is_repaired(fake_service_factory):
    raw = (
        '```json\n{"recipe_name": "Stew", "ingredients": [{"item": "beef"}, {"item": "car'
    )
    service = fake_service_factory(extraction=raw, nutrition={"calories": 500})

    recipe = extract_recipe(IMAGE, "image/png", service=service)

    assert recipe.recipe_name == "Stew"
    assert [i.item for i in recipe.ingredients] == ["beef"]


@pytest.mark.parametrize(
    "content, mime_type",
    [
        (b"", "image/png"),
        (IMAGE, "image/gif"),
        (IMAGE, "text/plain"),
        (IMAGE, ""),
    ],
)
def test_invalid_input_is_rejected_before_any_call(fake_service_factory, content, mime_type):
    service = fake_service_factory(extraction=CHICKEN_SOUP)

    with pytest.raises(InvalidInput):
        extract_recipe(content, mime_type, service=service)
    with pytest.raises(InvalidInput):
        run_scan_pipeline(content, mime_type, service=service)
    assert service.extract_calls == []


def test_pdf_is_sent_with_its_mime_type(fake_service_factory):
    service = fake_service_factory(extraction=FULL_NUTRITION)

    extract_recipe(b"%PDF-1.7 fake", "application/pdf", service=service)

    call = service.extract_calls[0]
    assert call["mime_type"] == "application/pdf"
    assert "PDF document" in call["prompt"]


def test_scan_pipeline_without_store(fake_service_factory):
    service = fake_service_factory(extraction=FULL_NUTRITION)

    result = run_scan_pipeline(IMAGE, "image/png", service=service)

    assert result["cached"] is False
    assert result["fingerprint"] == hash_bytes(IMAGE)
    assert result["recipe"].recipe_name == "Pancakes"


def test_second_scan_of_same_file_is_cached(fake_service_factory, db_session):
    store = SqlRecipeStore(db_session, "user-1")
    service = fake_service_factory(extraction=CHICKEN_SOUP, nutrition={"calories": 250})

    first = run_scan_pipeline(IMAGE, "image/png", store=store, service=service)
    assert first["cached"] is False
    store.create(first["recipe"], fingerprint=first["fingerprint"])

    second = run_scan_pipeline(IMAGE, "image/png", store=store, service=service)

    assert second["cached"] is True
    assert second["recipe"].recipe_name == "Chicken Soup"
    assert second["recipe"].nutrition_ai_estimated is True
    assert len(service.extract_calls) == 1
    assert len(service.text_calls) == 1


def test_cache_is_per_user(fake_service_factory, db_session):
    service = fake_service_factory(extraction=FULL_NUTRITION)
    SqlRecipeStore(db_session, "user-1").create(Recipe(recipe_name="Otra"), fingerprint=hash_bytes(IMAGE))

    result = run_scan_pipeline(IMAGE, "image/png", store=SqlRecipeStore(db_session, "user-2"), service=service)

    assert result["cached"] is False
    assert len(service.extract_calls) == 1


def test_use_cache_false_bypasses_lookup(fake_service_factory, db_session):
    store = SqlRecipeStore(db_session, "user-1")
    store.create(Recipe(recipe_name="Guardada"), fingerprint=hash_bytes(IMAGE))
    service = fake_service_factory(extraction=FULL_NUTRITION)

    result = run_scan_pipeline(IMAGE, "image/png", store=store, service=service, use_cache=False)

    assert result["cached"] is False
    assert result["recipe"].recipe_name == "Pancakes"


def test_non_finite_values_do_not_break_the_pipeline(fake_service_factory):
    service = fake_service_factory(
        extraction='{"recipe_name": "Soup", "servings": NaN, "nutrition": {"calories": NaN, "protein_g": 5, "fat_g": 2, "carbs_g": 9}}',
        nutrition='{"calories": NaN}',
    )

    recipe = extract_recipe(IMAGE, "image/png", service=service)

    assert recipe.recipe_name == "Soup"
    assert recipe.servings is None
    # NaN cuenta como faltante y se pide al estimador
    assert len(service.text_calls) == 1
    assert recipe.nutrition == NutritionFacts(calories=None, protein_g=5, fat_g=2, carbs_g=9)
    assert recipe.nutrition_ai_estimated is False
    assert recipe.nutrition_servings_used is None
