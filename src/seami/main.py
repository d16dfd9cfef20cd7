"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import AppConfig, load_config
from .dependencies import include_routers
from .logging import configure_logging
from .publishers.publishers_factory import PublisherRegistry


def create_app(
    config: AppConfig | None = None, *, publishers: PublisherRegistry | None = None
) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    configure_logging()
    cfg = config or load_config()
    app = FastAPI(title="seami")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    include_routers(app, cfg, publishers=publishers)
    return app


def run() -> None:
    import uvicorn

    cfg = load_config()
    uvicorn.run(create_app(cfg), host="0.0.0.0", port=cfg.port)


if __name__ == "__main__":
    run()
