from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request

from controllers.agent_controller import cancel_running_sessions
from routes.agent_route import router as agent_router
from routes.image_route import router as image_router
from services.providers import build_providers, close_providers
from utils.logging_config import configure_logging
from utils.settings import load_settings

load_dotenv()  # Load environment variables from .env file if present


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - process-wide settings from the environment
      - the OpenAI async client, Exa search and the services built on them
    and attach them to `app.state`.
    """
    settings = load_settings()
    configure_logging(settings.log_level)

    app.state.settings = settings
    app.state.providers = build_providers(settings)

    try:
        yield
    finally:
        # Sessions may still be using the client.
        await cancel_running_sessions()
        await close_providers(getattr(app.state, "providers", None))


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports which providers are configured.
        """
        providers = getattr(request.app.state, "providers", None)
        has_openai = providers is not None and providers.openai_client is not None
        has_search = providers is not None and providers.search.available
        return {"ok": True, "openai_available": has_openai, "search_available": has_search}

    # Register application routers
    app.include_router(agent_router)
    app.include_router(image_router)

    return app


app = create_app()
