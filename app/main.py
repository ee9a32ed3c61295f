import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes.extract import router as extract_router
from app.api.routes.health import router as health_router
from app.api.routes.highlights import router as highlights_router
from app.api.routes.verify import router as verify_router
from app.core.logging import setup_logging
from app.services.extraction.chain import ExtractionChain
from app.services.extraction.openai_provider import build_providers
from app.services.ocr.transcriber import DocumentTranscriber
from app.state import global_state

# Logging comes up before the app object exists
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Bid Highlight Service...")

    global_state.extraction_chain = ExtractionChain(build_providers())
    logger.info("Extraction providers: %s", global_state.extraction_chain.provider_names() or "none configured")

    # OCR engines are created per document inside the transcriber
    global_state.transcriber = DocumentTranscriber()

    logger.info("System ready!")
    yield
    logger.info("Shutting down service...")
    global_state.extraction_chain = None
    global_state.transcriber = None


app = FastAPI(title="Bid Highlight Service", lifespan=lifespan)

app.include_router(health_router, prefix="/api")
app.include_router(extract_router, prefix="/api")
app.include_router(verify_router, prefix="/api")
app.include_router(highlights_router, prefix="/api")
