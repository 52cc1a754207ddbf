from __future__ import annotations
import json, asyncio
from pathlib import Path
from fastapi import FastAPI, Request, Query, HTTPException
from fastapi.responses import HTMLResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from pydantic import BaseModel

from .. import __version__
from ..config import Settings
from ..core.viewer import DiffViewer
from ..tools.logs import make_logger
from ..view.render import Viewport

class TouchIn(BaseModel):
    x: float
    y: float

class ScrollIn(BaseModel):
    delta_y: float

class ResizeIn(BaseModel):
    width: float
    height: float

def build_viewer(settings: Settings) -> DiffViewer:
    return DiffViewer(
        style=settings.style.to_style(),
        viewport=Viewport(float(settings.screen.width), float(settings.screen.height)),
        log=make_logger(settings),
    )

def create_app(settings: Settings, viewer: DiffViewer | None = None, *, poll_interval: float = 0.25) -> FastAPI:
    app = FastAPI(title="see_code", docs_url=None, redoc_url=None)

    static_dir = Path(__file__).parent / "static"
    tmpl_dir = Path(__file__).parent / "templates"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    templates = Jinja2Templates(directory=str(tmpl_dir))

    app.state.settings = settings
    app.state.viewer = viewer or build_viewer(settings)

    def _viewer() -> DiffViewer:
        return app.state.viewer

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok", "version": __version__}

    # -------- CHARGEMENT --------
    def _loaded(ok: bool) -> dict:
        state = _viewer().snapshot()
        if not ok:
            raise HTTPException(status_code=422, detail="Diff illisible ou vide: aucun arbre affiché")
        return {"loaded": True, "files": state["files"], "state": state}

    @app.post("/api/diff")
    async def load_diff(request: Request) -> dict:
        body = await request.body()
        if len(body) > settings.transport.max_message_size:
            raise HTTPException(status_code=413, detail="Message trop volumineux")
        # analyse hors de la boucle: les autres requêtes et le flux SSE continuent
        return _loaded(await run_in_threadpool(_viewer().load, body))

    @app.post("/api/diff/json")
    async def load_diff_json(request: Request) -> dict:
        body = await request.body()
        if len(body) > settings.transport.max_message_size:
            raise HTTPException(status_code=413, detail="Message trop volumineux")
        return _loaded(await run_in_threadpool(_viewer().load_json, body))

    @app.delete("/api/diff")
    def clear_diff() -> dict:
        _viewer().clear()
        return {"state": _viewer().snapshot()}

    # -------- LECTURE --------
    @app.get("/api/state")
    def state() -> dict:
        return _viewer().snapshot()

    @app.get("/api/tree")
    def tree() -> list[dict]:
        return _viewer().document()

    @app.get("/api/nodes")
    def nodes(width: float | None = Query(default=None), height: float | None = Query(default=None)) -> dict:
        v = _viewer()
        viewport = None
        if width is not None and height is not None:
            viewport = Viewport(width, height)
        items = [n.to_dict() for n in v.get_visible_nodes_for_render(viewport)]
        return {"state": v.snapshot(), "nodes": items}

    @app.get("/api/locate")
    def where(x: float, y: float) -> dict:
        return {"target": _viewer().describe_point(x, y)}

    # -------- SAISIE --------
    @app.post("/api/touch")
    def touch(payload: TouchIn) -> dict:
        toggled = _viewer().on_touch(payload.x, payload.y)
        return {"toggled": toggled, "state": _viewer().snapshot()}

    @app.post("/api/scroll")
    def scroll(payload: ScrollIn) -> dict:
        _viewer().on_scroll(payload.delta_y)
        return {"state": _viewer().snapshot()}

    @app.post("/api/resize")
    def resize(payload: ResizeIn) -> dict:
        if payload.width <= 0 or payload.height <= 0:
            raise HTTPException(status_code=400, detail="Dimensions invalides")
        _viewer().on_resize(payload.width, payload.height)
        return {"state": _viewer().snapshot()}

    # -------- FLUX SSE (une trame par révision) --------
    async def _sse_generator(last_revision: int | None, once: bool = False):
        _last = -1 if last_revision is None else last_revision
        while True:
            snap = _viewer().snapshot()
            if snap["revision"] != _last:
                _last = snap["revision"]
                chunk = f"id: {_last}\ndata: {json.dumps(snap, ensure_ascii=False)}\n\n".encode("utf-8")
                yield chunk
            if once:
                break
            await asyncio.sleep(poll_interval)

    @app.get("/api/events/stream")
    async def events_stream(last_revision: int | None = Query(default=None), once: bool = Query(default=False)) -> StreamingResponse:
        gen = _sse_generator(last_revision=last_revision, once=once)
        return StreamingResponse(gen, media_type="text/event-stream", headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"})

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        st = app.state.settings
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": "see_code",
                "version": __version__,
                "profile": st.general.profile,
                "background": f"#{st.style.to_style().colors['background'] & 0xFFFFFF:06x}",
                "scroll_sensitivity": st.style.to_style().scroll_sensitivity,
            },
        )

    return app
