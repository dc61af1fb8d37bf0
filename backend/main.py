from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pathlib import Path
from typing import Optional
import uvicorn, logging, sys

from config import Settings, load_settings
from errors import ConfigError, MCQGenError, UpstreamProxyError, ValidationError
from mcq_client import CompletionProvider, OpenAICompletionProvider, generate_mcqs, list_models
from pdf_parser import extract_text_from_pdf_bytes
from utils import open_upload, safe_unlink

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s  %(levelname)s  %(message)s"
PDF_MEDIA_TYPE = "application/pdf"
CHUNK_SIZE = 1024 * 1024


async def receive_upload(request: Request, pdfFile: Optional[UploadFile] = File(None)) -> Optional[Path]:
    """
    Check the multipart upload and stream it into the uploads directory.

    Runs before the endpoint body, so a rejected file never reaches extraction.
    Returns None when no file was sent.
    """
    if pdfFile is None:
        return None
    settings: Settings = request.app.state.settings

    if pdfFile.content_type != PDF_MEDIA_TYPE:
        raise ValidationError("Only PDF files allowed")

    dest, out = open_upload(settings.uploads_dir)
    size = 0
    try:
        with out:
            while True:
                chunk = await pdfFile.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > settings.max_upload_bytes:
                    raise ValidationError(
                        f"File too large. Max: {settings.max_upload_bytes} bytes "
                        f"({settings.max_upload_bytes // 1048576}MB)"
                    )
                out.write(chunk)
    except BaseException:
        # the handler's cleanup never runs for a file that failed to arrive
        safe_unlink(dest)
        raise

    log.info("Received %s (%d bytes) -> %s", pdfFile.filename, size, dest)
    return dest


def _read_and_extract(path: Path) -> str:
    return extract_text_from_pdf_bytes(path.read_bytes())


def create_app(settings: Optional[Settings] = None, provider: Optional[CompletionProvider] = None, http_transport=None) -> FastAPI:
    if settings is None:
        settings = load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = FastAPI(title="PDF to MCQ Generator")
    app.state.settings = settings
    app.state.provider = provider or OpenAICompletionProvider(settings)
    app.state.http_transport = http_transport
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(UpstreamProxyError)
    async def upstream_error(request: Request, exc: UpstreamProxyError):
        return JSONResponse(status_code=exc.status_code, content=exc.body)

    @app.exception_handler(MCQGenError)
    async def pipeline_error(request: Request, exc: MCQGenError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        # a text field named pdfFile is treated like no file at all
        if any("pdfFile" in err.get("loc", ()) for err in exc.errors()):
            message = "No file uploaded"
        else:
            message = "Invalid request"
        log.error("Rejected request: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        log.exception("Unhandled error: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})

    @app.get("/", response_class=HTMLResponse)
    async def index():
        page = settings.frontend_page.read_text(encoding="utf-8")
        return page.replace("__BACKEND_URL__", settings.backend_url)

    @app.get("/health")
    async def health():
        return {"status": "Online", "model": settings.model}

    @app.get("/api/list-models")
    async def models(request: Request):
        found = await list_models(settings, transport=request.app.state.http_transport)
        return {"ok": True, "models": found}

    @app.post("/api/generate-mcqs")
    async def generate(request: Request, upload: Optional[Path] = Depends(receive_upload)):
        if upload is None:
            raise ValidationError("No file uploaded")
        try:
            # 1. extract text (blocking parse goes to the threadpool)
            text = await run_in_threadpool(_read_and_extract, upload)
            log.info("Extracted %d characters from %s", len(text), upload.name)
            # 2. ask the model for MCQs
            mcqs = await generate_mcqs(text, request.app.state.provider, strict=settings.strict_validation)
        except MCQGenError as e:
            log.error("Error processing request: %s", e.message)
            raise
        except Exception as e:
            log.exception("Error processing request")
            raise MCQGenError(str(e) or "Failed") from e
        finally:
            safe_unlink(upload)

        log.info("Generated %d MCQs", len(mcqs))
        return {"success": True, "mcqs": mcqs}

    return app


if __name__ == "__main__":
    try:
        settings = load_settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        log.error(e.message)
        sys.exit(1)

    app = create_app(settings)
    log.info("PORT = %s", settings.port)
    log.info("API key preview: %s", settings.key_preview())
    log.info("Server running on %s. Default model=%s", settings.port, settings.model)
    uvicorn.run(app, host=settings.host, port=settings.port)
