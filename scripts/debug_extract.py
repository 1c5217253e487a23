import sys
import os
import asyncio
import json

# Setup path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from recipebox.exceptions import RecipeExtractionError
from recipebox.services.extraction import RecipeExtractionService


async def debug_extract(url: str):
    service = RecipeExtractionService()
    print(f"Extracting {url} ...")
    try:
        result = await service.extract_from_url(url)
    except RecipeExtractionError as e:
        print(f"FAILED ({e.status_code}): {e.message}")
        return 1

    print(f"Source: {result.source}")
    print(json.dumps(result.model_dump(by_alias=True), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python scripts/debug_extract.py <url>")
        sys.exit(2)
    sys.exit(asyncio.run(debug_extract(sys.argv[1])))
