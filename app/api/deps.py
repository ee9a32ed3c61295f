from typing import Annotated

from fastapi import Depends, HTTPException

from app.services.extraction.chain import ExtractionChain
from app.services.ocr.transcriber import DocumentTranscriber
from app.state import global_state


async def get_extraction_chain() -> ExtractionChain:
    if not global_state.extraction_chain:
        raise HTTPException(status_code=503, detail="Extraction service not initialized")
    return global_state.extraction_chain


async def get_transcriber() -> DocumentTranscriber:
    if not global_state.transcriber:
        raise HTTPException(status_code=503, detail="OCR service not initialized")
    return global_state.transcriber


ExtractionChainDep = Annotated[ExtractionChain, Depends(get_extraction_chain)]
TranscriberDep = Annotated[DocumentTranscriber, Depends(get_transcriber)]
