"""FastAPI web server for frontgen."""

import logging
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from .app import FrontendGenerator
from .client import CompletionClient
from .config import Config
from .core import FRAMEWORKS
from .errors import ChatNotFoundError, GenerationBusyError
from .export import chat_to_json, chat_to_markdown
from .preview import SANDBOX_CSP
from .session_store import SessionStore
from .storage import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


class BootRequest(BaseModel):
    fragment: Optional[str] = None


class PromptRequest(BaseModel):
    prompt: str


class FrameworkRequest(BaseModel):
    framework: str


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    framework: Optional[str] = None


class ShareRequest(BaseModel):
    page_url: str


def create_app(
    config: Config | None = None,
    storage: KeyValueStore | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the app around one FrontendGenerator."""
    config = config or Config.from_env()
    if storage is None:
        storage = JsonFileStore(config.data_path)
        logger.info("Persisting session to %s", config.data_path)
    if not config.api_key:
        logger.warning("No API key configured; generation is disabled")

    generator = FrontendGenerator(SessionStore(storage), CompletionClient(config, http_client))

    app = FastAPI(title="frontgen", version="0.1.0")
    app.state.generator = generator

    @app.exception_handler(ChatNotFoundError)
    async def chat_not_found(request: Request, exc: ChatNotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(GenerationBusyError)
    async def generation_busy(request: Request, exc: GenerationBusyError):
        return JSONResponse(status_code=409, content={"detail": exc.message})

    _register_routes(app, generator)
    return app


def _register_routes(app: FastAPI, gen: FrontendGenerator) -> None:
    # ── Routes ───────────────────────────────────────────────────────

    @app.get("/")
    async def index():
        """Serve the frontend."""
        html_path = STATIC_DIR / "index.html"
        if not html_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return HTMLResponse(html_path.read_text(encoding="utf-8"))

    @app.get("/preview")
    async def preview():
        """Serve the live preview document inside a CSP sandbox."""
        gen.snapshot()
        return HTMLResponse(
            gen.preview.document,
            headers={"Content-Security-Policy": SANDBOX_CSP, "Cache-Control": "no-store"},
        )

    @app.post("/api/boot")
    async def boot(body: BootRequest):
        gen.boot(body.fragment)
        return gen.snapshot()

    @app.get("/api/state")
    async def get_state():
        return gen.snapshot()

    @app.get("/api/templates")
    async def get_templates():
        return gen.templates()

    @app.get("/api/frameworks")
    async def get_frameworks():
        return list(FRAMEWORKS)

    @app.put("/api/prompt")
    async def set_prompt(body: PromptRequest):
        gen.set_prompt(body.prompt)
        return gen.snapshot()

    @app.put("/api/framework")
    async def set_framework(body: FrameworkRequest):
        try:
            gen.set_framework(body.framework)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return gen.snapshot()

    @app.post("/api/sidebar")
    async def toggle_sidebar():
        gen.toggle_sidebar()
        return gen.snapshot()

    @app.post("/api/generate")
    async def generate(body: GenerateRequest):
        """Run one generation round. Failures are reported in the snapshot's error field."""
        if body.framework is not None and body.framework not in FRAMEWORKS:
            raise HTTPException(status_code=400, detail=f"Unknown framework: {body.framework}")
        await gen.generate(body.prompt, body.framework)
        return gen.snapshot()

    @app.post("/api/chats/new")
    async def new_chat():
        gen.new_chat()
        return gen.snapshot()

    @app.post("/api/chats/{chat_id}/select")
    async def select_chat(chat_id: str):
        gen.select_chat(chat_id)
        return gen.snapshot()

    @app.delete("/api/chats/{chat_id}")
    async def delete_chat(chat_id: str):
        gen.delete_chat(chat_id)
        return gen.snapshot()

    @app.post("/api/templates/{title}")
    async def use_template(title: str):
        try:
            gen.use_template(title)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown template: {title}")
        return gen.snapshot()

    @app.post("/api/copy")
    async def copy():
        """Return the text the browser should place on the clipboard."""
        text = gen.copy_text()
        return {"text": text, "state": gen.snapshot()}

    @app.post("/api/share")
    async def share(body: ShareRequest):
        url = gen.share(body.page_url)
        return {"url": url, "state": gen.snapshot()}

    @app.get("/api/export/{chat_id}")
    async def export_chat(
        chat_id: str,
        format: str = Query("md", description="Export format: md or json"),
    ):
        """Export a chat as Markdown or JSON."""
        chat = gen.store.get_chat(chat_id)
        if chat is None:
            raise HTTPException(status_code=404, detail="Chat not found")

        safe_title = "".join(c if c.isalnum() or c in "-_ " else "" for c in chat.title)[:50] or "chat"

        if format == "json":
            return Response(
                content=chat_to_json(chat),
                media_type="application/json",
                headers={"Content-Disposition": f'attachment; filename="{safe_title}.json"'},
            )
        return Response(
            content=chat_to_markdown(chat, framework=gen.ui.framework),
            media_type="text/markdown",
            headers={"Content-Disposition": f'attachment; filename="{safe_title}.md"'},
        )


app = create_app()
