"""
Word lists and the quantity/unit grammar shared by the heuristic parser
and the deterministic ingredient parser.

Both components read from here so they agree on what a unit or a
quantity looks like.
"""
import re

# Canonical unit -> every spelling we accept (singular/plural/abbreviation).
# A trailing period is allowed on any of them ("tsp.", "oz.").
UNIT_FORMS = {
    "teaspoon": ("teaspoon", "teaspoons", "tsp", "tsps"),
    "tablespoon": ("tablespoon", "tablespoons", "tbsp", "tbsps", "tbs"),
    "cup": ("cup", "cups"),
    "ounce": ("ounce", "ounces", "oz"),
    "pound": ("pound", "pounds", "lb", "lbs"),
    "gram": ("gram", "grams", "g"),
    "kilogram": ("kilogram", "kilograms", "kg", "kgs"),
    "milliliter": ("milliliter", "milliliters", "millilitre", "millilitres", "ml"),
    "liter": ("liter", "liters", "litre", "litres", "l"),
    "pinch": ("pinch", "pinches"),
    "dash": ("dash", "dashes"),
    "clove": ("clove", "cloves"),
    "slice": ("slice", "slices"),
    "package": ("package", "packages", "pkg", "pkgs"),
    "can": ("can", "cans"),
    "bunch": ("bunch", "bunches"),
    "stick": ("stick", "sticks"),
}

UNIT_WORDS = frozenset(form for forms in UNIT_FORMS.values() for form in forms)

UNICODE_FRACTIONS = {
    "½": 0.5,
    "⅓": 0.333,
    "⅔": 0.667,
    "¼": 0.25,
    "¾": 0.75,
    "⅕": 0.2,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}
_GLYPHS = "".join(UNICODE_FRACTIONS)

# Checked in this order: a mixed number must win over its integer part,
# a range over its first number, a fraction over its numerator.
QUANTITY_PATTERNS = [
    ("mixed", rf"\d+\s+\d+/\d+|\d+\s?[{_GLYPHS}]"),
    ("range", r"\d+(?:\.\d+)?\s*[-–]\s*\d+(?:[./]\d+)?"),
    ("fraction", r"\d+/\d+"),
    ("decimal", r"\d*\.\d+"),
    ("integer", r"\d+"),
    ("unicode", rf"[{_GLYPHS}]"),
]

QUANTITY_RES = [
    (kind, re.compile(rf"^(?P<amount>{pattern})(?![\d/.])")) for kind, pattern in QUANTITY_PATTERNS
]

# Longest spellings first so "tbsp" is not read as "tbs" + "p"
UNIT_RE = re.compile(
    r"^(?P<unit>" + "|".join(re.escape(u) for u in sorted(UNIT_WORDS, key=len, reverse=True)) + r")\.?(?![A-Za-z])",
    re.IGNORECASE,
)

# Base forms, matched as whole words
COOKING_VERBS = frozenset({
    "add", "arrange", "bake", "beat", "blend", "boil", "braise", "bring",
    "broil", "chill", "chop", "combine", "cook", "cover", "dice", "drain",
    "drizzle", "fold", "fry", "garnish", "grate", "grill", "heat", "knead",
    "marinate", "melt", "microwave", "mince", "mix", "peel", "place", "pour",
    "preheat", "reduce", "refrigerate", "remove", "rinse", "roast", "saute",
    "sauté", "season", "sear", "serve", "simmer", "slice", "spread",
    "sprinkle", "steam", "stir", "strain", "toss", "transfer", "whisk",
})

INSTRUCTION_CONNECTORS = frozenset({"until", "for", "in", "with", "into", "over"})

INGREDIENT_HEADERS = ("ingredients", "ingredient", "shopping list", "what you need", "you will need")
INSTRUCTION_HEADERS = ("instructions", "instruction", "directions", "direction", "method", "steps", "preparation", "how to make")
# Sections that end whatever list we were in
NEUTRAL_HEADERS = ("notes", "nutrition", "tips", "equipment", "reviews", "comments")

GENERIC_TITLE_WORDS = frozenset({
    "recipe", "recipes", "ingredients", "instructions", "directions", "method",
    "steps", "print", "pin", "jump", "servings", "prep", "nutrition", "menu",
    "search", "home", "subscribe", "comments", "share", "video",
})

FOOD_WORDS = frozenset({
    "bacon", "bake", "baked", "beans", "beef", "bread", "breakfast", "broccoli",
    "butter", "cake", "cheese", "chicken", "chili", "chocolate", "cook",
    "cookies", "cream", "curry", "delicious", "dessert", "dinner", "dough",
    "egg", "eggs", "fish", "flour", "fried", "garlic", "grilled", "honey",
    "lemon", "lunch", "meal", "noodles", "oil", "onion", "pasta", "pepper",
    "pizza", "pork", "potato", "potatoes", "recipe", "rice", "salad",
    "salmon", "salt", "sauce", "shrimp", "soup", "spicy", "steak", "sugar",
    "tacos", "tofu", "tomato", "tomatoes", "vegetables", "yummy",
})

# Metadata lines that look like ingredients ("12 minutes", "Serves: 4")
NON_INGREDIENT_WORDS = frozenset({
    "minute", "minutes", "min", "mins", "hour", "hours", "hr", "hrs",
    "second", "seconds", "degrees", "degree", "servings", "serving", "people",
    "calories", "kcal", "°", "°f", "°c", "serves", "yield", "yields",
    "makes", "time", "total", "prep", "rating", "ratings", "votes", "reviews",
})

MAX_INGREDIENTS = 25
MAX_INSTRUCTIONS = 20
HEADER_MAX_LEN = 40
INSTRUCTION_MIN_LEN = 15
INSTRUCTION_MAX_LEN = 300
INGREDIENT_MAX_LEN = 120
TITLE_MIN_LEN = 3
TITLE_MAX_LEN = 80
TITLE_SCAN_LINES = 30
SHORT_INPUT_MAX_CHARS = 600
