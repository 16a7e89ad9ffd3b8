import logging
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field

from sitegen.errors import UnsupportedProviderError, UpstreamError
from sitegen.llm_client import (
    GenerationRequest,
    ReferenceImage,
    generate as llm_generate,
    provider_catalog,
)

APP_VERSION = "1.0.0"

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

log = logging.getLogger(__name__)

app = FastAPI()

allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

static_dir = Path("static")
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=str(static_dir), html=False), name="static")


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = str(uuid.uuid4())
    start = time.time()
    request.state.request_id = rid
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        dur_ms = int((time.time() - start) * 1000)
        log.info(
            "rid=%s method=%s path=%s status=%s dur_ms=%d",
            rid,
            request.method,
            request.url.path,
            getattr(response, "status_code", "?"),
            dur_ms,
        )


class ImagePayload(BaseModel):
    name: str = ""
    type: str = ""
    data: str = ""


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., min_length=1, description="What the website should be, or what to change")
    ai_provider: str = Field(..., alias="aiProvider", description="openai | gemini | claude")
    api_key: str = Field(..., alias="apiKey", description="Caller's own provider key; never stored")
    images: List[ImagePayload] = Field(default_factory=list)
    existing_code: Optional[str] = Field(default=None, alias="existingCode")

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            prompt=self.prompt,
            provider_id=self.ai_provider,
            credential=self.api_key,
            reference_images=tuple(
                ReferenceImage(name=i.name, mime_type=i.type, data=i.data) for i in self.images
            ),
            prior_document=self.existing_code,
        )


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for e in exc.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()) if p != "body") or "(body)"
        problems.append(f"{loc}: {e.get('msg', 'invalid')}")
    return _failure(400, "Invalid request: " + "; ".join(problems))


@app.get("/", response_class=HTMLResponse)
def root() -> str:
    """
    Serve the front-end from templates/index.html if present.
    Fallback to project-root index.html, else a tiny placeholder page.
    """
    tpl_index = Path("templates/index.html")
    if tpl_index.exists():
        return tpl_index.read_text(encoding="utf-8")

    root_index = Path("index.html")
    if root_index.exists():
        return root_index.read_text(encoding="utf-8")

    return "<!doctype html><html><body><h1>AI Website Generator</h1><p>Add templates/index.html for the UI.</p></body></html>"


@app.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "version": APP_VERSION}


@app.get("/api/providers")
def providers() -> Dict[str, Any]:
    return {"providers": provider_catalog()}


@app.post("/api/generate")
def generate_endpoint(req: GenerateRequest):
    # Sync endpoint: FastAPI runs it in its threadpool so the upstream call blocks only this request.
    try:
        code = llm_generate(req.to_generation_request())
    except UnsupportedProviderError as e:
        return _failure(400, str(e))
    except UpstreamError as e:
        return _failure(502, str(e))
    except Exception as e:
        log.exception("generate failed provider=%s", req.ai_provider)
        return _failure(500, str(e) or "Unknown error")
    return {"success": True, "code": code}
