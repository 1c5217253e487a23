import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from recipebox.exceptions import FetchError, InputError, NoRecipeFound
from recipebox.infra.http_client import RawPage
from recipebox.services.ai_extraction import AIRecipeExtractor
from recipebox.services.extraction import RecipeExtractionService, validate_url
from recipebox.services.ingredient_structurer import IngredientStructurer
from recipebox.services.video_resolver import VideoMetadata

JSON_LD_PAGE = """<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@type": "Recipe", "name": "Fluffy Pancakes",
 "recipeIngredient": ["1 cup flour", "1 egg", "3/4 cup milk", "1 tbsp sugar"],
 "recipeInstructions": [{"@type": "HowToStep", "text": "Whisk everything together."},
                        {"@type": "HowToStep", "text": "Fry in a hot pan."}],
 "totalTime": "PT20M", "recipeYield": "4 servings", "image": "https://example.com/pancakes.jpg"}
</script></head><body><p>Pancakes!</p></body></html>"""

PLAIN_PAGE = """<html><body>
<nav>Home | Recipes</nav>
<article>
<h1>Best Banana Bread</h1>
<h2>Ingredients</h2>
<ul><li>2 cups all-purpose flour</li><li>1 tsp baking soda</li><li>3 ripe bananas</li></ul>
<h2>Instructions</h2>
<ol><li>Preheat the oven to 350F.</li><li>Mix the flour with the bananas until smooth.</li><li>Bake for 60 minutes.</li></ol>
</article>
</body></html>"""

AI_RECIPE = {
    "title": "Banana Bread",
    "ingredients": ["2 cups flour", "3 bananas"],
    "instructions": ["Mix.", "Bake."],
    "cookTime": 60,
    "servings": 8,
}

VIDEO_DESCRIPTION = (
    "Ingredients:\n2 cups flour\n1 tsp salt\n3 eggs\n\n"
    "Instructions:\n1. Whisk the eggs with the salt until smooth.\n"
    "2. Fold in the flour and rest the dough for ten minutes."
)


class FakeFetcher:
    def __init__(self, html=None, error=None):
        self.html = html
        self.error = error
        self.urls = []

    async def fetch(self, url):
        self.urls.append(url)
        if self.error:
            raise self.error
        return RawPage(url=url, status=200, content_type="text/html", text=self.html)


class FakeVideoResolver:
    def __init__(self, meta=None):
        self.meta = meta

    async def resolve(self, url):
        return self.meta


@pytest.fixture
def make_service(fake_ai):
    def _make(html="", fetch_error=None, ai_responses=(), ai_available=False, video=None):
        ai = fake_ai(*ai_responses, available=ai_available)
        service = RecipeExtractionService(
            fetcher=FakeFetcher(html, fetch_error),
            video_resolver=FakeVideoResolver(video),
            ai_extractor=AIRecipeExtractor(models=["m-fast", "m-smart"], client=ai),
            structurer=IngredientStructurer(model="m-struct", client=fake_ai(available=False)),
        )
        return service, ai
    return _make


@pytest.mark.asyncio
async def test_structured_data_takes_precedence(make_service):
    service, ai = make_service(JSON_LD_PAGE, ai_responses=[json.dumps(AI_RECIPE)], ai_available=True)

    result = await service.extract_from_url("https://example.com/pancakes")

    assert result.success is True
    assert result.source == "structured_data"
    assert result.title == "Fluffy Pancakes"
    assert result.ingredients == ["1 cup flour", "1 egg", "3/4 cup milk", "1 tbsp sugar"]
    assert result.instructions == ["Whisk everything together.", "Fry in a hot pan."]
    assert result.cook_time == 20
    assert result.servings == 4
    assert result.image == "https://example.com/pancakes.jpg"
    ai.generate_text.assert_not_awaited()

@pytest.mark.asyncio
async def test_structured_ingredients_keep_order_and_length(make_service):
    service, _ = make_service(JSON_LD_PAGE)

    result = await service.extract_from_url("https://example.com/pancakes")

    assert len(result.structured_ingredients) == len(result.ingredients)
    assert [s.name for s in result.structured_ingredients] == ["flour", "egg", "milk", "sugar"]
    assert all(s.name for s in result.structured_ingredients)

@pytest.mark.asyncio
async def test_ai_receives_normalized_page_text(make_service):
    service, ai = make_service(PLAIN_PAGE, ai_responses=[json.dumps(AI_RECIPE)], ai_available=True)

    result = await service.extract_from_url("https://example.com/banana-bread")

    assert result.source == "ai"
    assert result.title == "Banana Bread"
    assert result.cook_time == 60
    assert result.servings == 8
    prompt = ai.generate_text.await_args.kwargs["prompt"]
    assert "- 2 cups all-purpose flour" in prompt
    assert "<li>" not in prompt
    assert "Home | Recipes" not in prompt

@pytest.mark.asyncio
async def test_degrades_to_heuristic_when_ai_fails(make_service):
    service, ai = make_service(PLAIN_PAGE, ai_responses=["garbage", "more garbage"], ai_available=True)

    result = await service.extract_from_url("https://example.com/banana-bread")

    assert result.success is True
    assert result.source == "heuristic"
    assert result.title == "Best Banana Bread"
    assert len(result.ingredients) == 3
    assert result.instructions == [
        "Preheat the oven to 350F.",
        "Mix the flour with the bananas until smooth.",
        "Bake for 60 minutes.",
    ]
    assert result.cook_time == 0
    assert result.servings == 1
    assert ai.generate_text.await_count == 2

@pytest.mark.asyncio
async def test_heuristic_only_when_ai_is_unavailable(make_service):
    service, ai = make_service(PLAIN_PAGE)

    result = await service.extract_from_url("https://example.com/banana-bread")

    assert result.source == "heuristic"
    assert len(result.structured_ingredients) == 3
    ai.generate_text.assert_not_awaited()

@pytest.mark.asyncio
async def test_empty_page_still_succeeds(make_service):
    service, _ = make_service("<html><body></body></html>")

    result = await service.extract_from_url("https://example.com/empty")

    assert result.success is True
    assert result.ingredients == []
    assert result.instructions == []
    assert result.structured_ingredients == []

@pytest.mark.asyncio
async def test_no_recipe_sentinel_is_surfaced(make_service):
    sentinel = json.dumps({"error": "No recipe found"})
    service, _ = make_service(PLAIN_PAGE, ai_responses=[sentinel, sentinel], ai_available=True)

    with pytest.raises(NoRecipeFound):
        await service.extract_from_url("https://example.com/about")

@pytest.mark.asyncio
async def test_fetch_failure_is_raised(make_service):
    service, ai = make_service(fetch_error=FetchError(404, "Not Found"), ai_available=True)

    with pytest.raises(FetchError) as exc:
        await service.extract_from_url("https://example.com/missing")

    assert exc.value.message == "Failed to fetch website: 404 Not Found"
    ai.generate_text.assert_not_awaited()

@pytest.mark.parametrize("url", [
    None,
    "",
    "   ",
    "not a url",
    "ftp://example.com/recipe",
    "http://localhost:8000/admin",
    "http://127.0.0.1/",
    "http://10.0.0.5/recipe",
    "http://192.168.1.1/",
    "http://169.254.169.254/latest/meta-data",
    "http://[::1]/",
])
def test_invalid_urls_are_rejected(url):
    with pytest.raises(InputError):
        validate_url(url)

def test_valid_url_is_trimmed():
    assert validate_url("  https://example.com/r  ") == "https://example.com/r"

@pytest.mark.asyncio
async def test_invalid_url_never_fetches(make_service):
    service, _ = make_service(PLAIN_PAGE)
    with pytest.raises(InputError):
        await service.extract_from_url("file:///etc/passwd")
    assert service.fetcher.urls == []

@pytest.mark.asyncio
async def test_video_text_replaces_page_text(make_service):
    video = VideoMetadata(
        video_id="dQw4w9WgXcQ",
        title="Fresh Pasta",
        description=VIDEO_DESCRIPTION,
        thumbnail="https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
    )
    service, _ = make_service("<html><body><p>Video player chrome</p></body></html>", video=video)

    result = await service.extract_from_url("https://youtu.be/dQw4w9WgXcQ")

    assert result.source == "heuristic"
    assert result.title == "Fresh Pasta"
    assert result.image == "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
    assert "3 eggs" in result.ingredients[2].lower()
    assert result.instructions[0] == "Whisk the eggs with the salt until smooth."

@pytest.mark.asyncio
async def test_video_survives_fetch_failure(make_service):
    video = VideoMetadata(video_id="dQw4w9WgXcQ", title="Fresh Pasta", description=VIDEO_DESCRIPTION)
    service, _ = make_service(fetch_error=FetchError(429, "Too Many Requests"), video=video)

    result = await service.extract_from_url("https://youtu.be/dQw4w9WgXcQ")

    assert result.success is True
    assert len(result.ingredients) == 3

@pytest.mark.asyncio
async def test_text_extraction_requires_text(make_service):
    service, _ = make_service()
    with pytest.raises(InputError):
        await service.extract_from_text("   ")

@pytest.mark.asyncio
async def test_text_extraction_uses_title_hint(make_service):
    service, _ = make_service()

    result = await service.extract_from_text(
        "Ingredients\n2 cups flour\n1 cup water\n\nInstructions\n1. Mix the flour with the water.",
        title_hint="Simple Dough",
    )

    assert result.title == "Simple Dough"
    assert result.ingredients == ["2 cups Flour", "1 cup Water"]
    assert result.instructions == ["Mix the flour with the water."]
    assert service.fetcher.urls == []

@pytest.mark.asyncio
async def test_heuristic_split_is_reused_without_restructuring(fake_ai):
    structurer = MagicMock()
    structurer.structure = AsyncMock(return_value=[])
    service = RecipeExtractionService(
        fetcher=FakeFetcher(PLAIN_PAGE),
        video_resolver=FakeVideoResolver(None),
        ai_extractor=AIRecipeExtractor(models=["m-fast"], client=fake_ai(available=False)),
        structurer=structurer,
    )

    result = await service.extract_from_url("https://example.com/banana-bread")

    assert [s.name for s in result.structured_ingredients] == ["All-purpose Flour", "Baking Soda", "Ripe Bananas"]
    assert result.structured_ingredients[0].amount == "2"
    structurer.structure.assert_not_awaited()

@pytest.mark.asyncio
async def test_title_only_video_is_used_when_fetch_fails(make_service):
    video = VideoMetadata(video_id="dQw4w9WgXcQ", title="Fresh Pasta With Garlic Butter")
    service, ai = make_service(
        fetch_error=FetchError(None, "timed out"),
        ai_responses=[json.dumps(AI_RECIPE)],
        ai_available=True,
        video=video,
    )

    result = await service.extract_from_url("https://youtu.be/dQw4w9WgXcQ")

    assert result.source == "ai"
    assert "Fresh Pasta With Garlic Butter" in ai.generate_text.await_args.kwargs["prompt"]
