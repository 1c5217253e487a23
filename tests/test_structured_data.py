import json
import pytest
from recipebox.parsing.structured_data import (
    StructuredDataExtractor,
    extract_structured_recipe,
    iter_json_ld_nodes,
)


def page(*blocks, body="<p>Some article text</p>"):
    scripts = "".join(
        f'<script type="application/ld+json">{b if isinstance(b, str) else json.dumps(b)}</script>'
        for b in blocks
    )
    return f"<html><head>{scripts}</head><body>{body}</body></html>"


SIMPLE = {
    "@context": "https://schema.org",
    "@type": "Recipe",
    "name": "Simple Bread",
    "description": "Crusty loaf",
    "recipeIngredient": ["2 cups flour", " 1 tsp salt "],
    "recipeInstructions": ["Mix.", "Bake."],
    "totalTime": "PT1H30M",
    "recipeYield": "4 servings",
    "image": ["https://example.com/bread.jpg"],
}


def test_recipe_block_is_used_verbatim():
    outcome = extract_structured_recipe(page(SIMPLE))
    assert outcome.source == "structured_data"
    assert outcome.ingredients == ["2 cups flour", "1 tsp salt"]
    assert outcome.instructions == ["Mix.", "Bake."]
    assert outcome.title == "Simple Bread"
    assert outcome.description == "Crusty loaf"
    assert outcome.cook_time == 90
    assert outcome.servings == 4
    assert outcome.image == "https://example.com/bread.jpg"

def test_graph_wrapper_and_type_list():
    data = {
        "@context": "https://schema.org",
        "@graph": [
            {"@type": "WebPage", "name": "Page"},
            {"@type": ["Recipe", "NewsArticle"], "name": "Soup", "recipeIngredient": ["1 onion"],
             "recipeInstructions": [{"@type": "HowToStep", "text": "Chop the onion."}]},
        ],
    }
    outcome = extract_structured_recipe(page(data))
    assert outcome.title == "Soup"
    assert outcome.ingredients == ["1 onion"]
    assert outcome.instructions == ["Chop the onion."]

def test_how_to_sections_and_step_prefixes():
    data = {
        "@type": "Recipe",
        "recipeIngredient": ["2 eggs"],
        "recipeInstructions": [
            {"@type": "HowToSection", "name": "Batter", "itemListElement": [
                {"@type": "HowToStep", "text": "Step 1: Whisk the eggs."},
                {"@type": "HowToStep", "name": "Rest the batter."},
            ]},
            {"@type": "HowToSection", "name": "Cook", "itemListElement": [
                {"@type": "HowToStep", "text": "Step 3. Fry in butter."},
            ]},
        ],
    }
    outcome = extract_structured_recipe(page(data))
    assert outcome.instructions == ["Whisk the eggs.", "Rest the batter.", "Fry in butter."]

def test_single_string_fields_are_split():
    data = {
        "@type": "Recipe",
        "recipeIngredient": "• 2 eggs\n- 1 cup milk\n\n",
        "recipeInstructions": "Preheat oven. Mix well.\n\nBake 20 minutes.",
    }
    outcome = extract_structured_recipe(page(data))
    assert outcome.ingredients == ["2 eggs", "1 cup milk"]
    assert outcome.instructions == ["Preheat oven.", "Mix well.", "Bake 20 minutes."]

def test_lenient_node_without_recipe_type():
    data = {"@type": "Thing", "recipeIngredient": ["1 lime"], "recipeInstructions": ["Squeeze."]}
    outcome = extract_structured_recipe(page(data))
    assert outcome.ingredients == ["1 lime"]

def test_malformed_block_is_skipped():
    outcome = extract_structured_recipe(page("{not json", SIMPLE))
    assert outcome.title == "Simple Bread"

def test_first_qualifying_block_wins():
    second = dict(SIMPLE, name="Other Bread", recipeIngredient=["5 cups flour"])
    outcome = extract_structured_recipe(page(SIMPLE, second))
    assert outcome.title == "Simple Bread"
    assert outcome.ingredients == ["2 cups flour", "1 tsp salt"]

def test_empty_recipe_node_does_not_count():
    empty = {"@type": "Recipe", "name": "Empty", "recipeIngredient": [], "recipeInstructions": []}
    outcome = extract_structured_recipe(page(empty, SIMPLE))
    assert outcome.title == "Simple Bread"

def test_defaults_when_fields_missing():
    data = {"@type": "Recipe", "recipeIngredient": ["1 egg"], "totalTime": "about an hour"}
    outcome = extract_structured_recipe(page(data))
    assert outcome.cook_time == 0
    assert outcome.servings == 1
    assert outcome.instructions == []
    assert outcome.image is None

def test_image_object():
    data = dict(SIMPLE, image={"@type": "ImageObject", "url": "https://example.com/a.jpg"})
    assert extract_structured_recipe(page(data)).image == "https://example.com/a.jpg"

def test_no_structured_data():
    assert extract_structured_recipe("<html><body><p>2 cups flour</p></body></html>") is None
    assert extract_structured_recipe("") is None

def test_iter_nodes_flattens_lists():
    html = page([{"@type": "Organization"}, SIMPLE])
    types = [n.get("@type") for n in iter_json_ld_nodes(html)]
    assert types == ["Organization", "Recipe"]

@pytest.mark.asyncio
async def test_strategy_wrapper():
    outcome = await StructuredDataExtractor().extract(page(SIMPLE))
    assert outcome.instructions == ["Mix.", "Bake."]

def test_raw_control_characters_inside_strings():
    block = (
        '{"@type": "Recipe", "name": "Tab Bread",'
        ' "recipeIngredient": ["1 cup\tflour", "1 tsp salt"],'
        ' "recipeInstructions": "Mix the flour.\nBake for 20 minutes."}'
    )
    outcome = extract_structured_recipe(page(block))

    assert outcome is not None
    assert outcome.ingredients[0].split() == ["1", "cup", "flour"]
    assert outcome.instructions == ["Mix the flour.", "Bake for 20 minutes."]
