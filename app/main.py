from loguru import logger
from dotenv import load_dotenv
from fastapi import FastAPI

from app.utils.logger import config as configure_logger

load_dotenv()
configure_logger()

from app._version import __version__  # noqa: E402
from app.config import CORS_ALLOW_CREDENTIALS, CORS_ORIGINS  # noqa: E402
from app.core.lifespan import lifespan  # noqa: E402
from app.cors import apply_cors_middleware, parse_origins  # noqa: E402
from app.api.cms import router as cms_router  # noqa: E402
from app.api.openlist import router as openlist_router  # noqa: E402

app = FastAPI(title="VODBridge", version=__version__, lifespan=lifespan)
apply_cors_middleware(
    app,
    origins=parse_origins(CORS_ORIGINS),
    allow_credentials=CORS_ALLOW_CREDENTIALS,
)
app.include_router(cms_router)  # catalog protocol
app.include_router(openlist_router)  # directory detail


# Healthcheck endpoint for CI/CD and monitoring
@app.get("/health")
async def healthcheck():
    return {"status": "ok", "version": __version__}


if __name__ == "__main__":
    logger.info("Starting VODBridge FastAPI server...")
    from app.cli import run_server

    run_server(app)
