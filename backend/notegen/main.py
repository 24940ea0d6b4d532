import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notegen.api.health import router as health_router
from notegen.api.templates import router as templates_router
from notegen.api.websocket import router as websocket_router
from notegen.config import settings
from notegen.config_loader import load_template_configs

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Backend starting...")

    count = load_template_configs()
    if count == 0:
        logger.warning("No note templates loaded from %s", settings.templates_dir)

    if settings.requires_api_key and not settings.export_provider_api_key():
        logger.warning(
            "No API key configured for provider '%s'; generation requests will fail",
            settings.llm_provider,
        )

    logger.info("Backend started with model %s", settings.get_llm_model())

    yield

    # Shutdown
    logger.info("Backend shutting down...")


app = FastAPI(title="Notes Generation Backend", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router)
app.include_router(templates_router)
app.include_router(websocket_router)
