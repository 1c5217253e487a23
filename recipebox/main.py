"""RecipeBox API: recipe extraction from pages, videos and pasted text."""
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .deps import limiter
from .routers import ai, ready, recipes
from .settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("recipebox")

app = FastAPI(title="RecipeBox API", version="0.1.0")

# Per-IP limits on the extraction endpoints
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

for module in (ready, recipes, ai):
    app.include_router(module.router, prefix="/api")

logger.info(f"RecipeBox API ready (ai_mode={settings.ai_mode}, models={settings.extraction_models})")
