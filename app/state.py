from app.services.extraction.chain import ExtractionChain
from app.services.ocr.transcriber import DocumentTranscriber


class AppState:
    extraction_chain: ExtractionChain | None = None
    transcriber: DocumentTranscriber | None = None


global_state = AppState()
