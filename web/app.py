"""FastAPI web application for the bioscience publication explorer.

Provides publication listing, graph snapshots, AI analysis, and a WebSocket
that streams the live force layout while relaying interaction events.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse

from biograph.analyze import analyze_publication, fallback_analysis
from biograph.config import CORPUS_PATH, CORPUS_URL, DEFAULT_HEIGHT, DEFAULT_WIDTH
from biograph.ingest import category_stats, filter_publications, load_corpus
from biograph.interaction import Explorer
from biograph.models import NODE_KINDS

logger = logging.getLogger(__name__)

MAX_CANVAS_SIZE = 8000


def dispatch(explorer, message):
    """Apply one client message to an Explorer.

    Raises ValueError (or KeyError/TypeError) for malformed messages; the
    caller reports these back to the client.
    """
    if not isinstance(message, dict):
        raise ValueError("Message must be a JSON object")
    kind = message.get("type")

    if kind == "focus":
        publication = explorer.find_publication(message["publication_id"])
        if publication is None:
            raise KeyError(f"Unknown publication {message['publication_id']}")
        explorer.focus(publication)
    elif kind == "hover":
        explorer.hover(message.get("node_id"))
    elif kind == "search":
        explorer.set_search(message.get("term", ""))
    elif kind == "toggle":
        explorer.set_type_visible(message["node_type"], message.get("visible", True))
    elif kind == "zoom":
        explorer.zoom(float(message["factor"]), float(message.get("x", 0)),
                      float(message.get("y", 0)))
    elif kind == "pan":
        explorer.pan(float(message["dx"]), float(message["dy"]))
    elif kind == "drag_start":
        explorer.drag_start(message["node_id"], float(message["x"]), float(message["y"]))
    elif kind == "drag_move":
        explorer.drag_move(float(message["x"]), float(message["y"]))
    elif kind == "drag_end":
        explorer.drag_end()
    elif kind == "click":
        explorer.click(message["node_id"])
    elif kind == "resize":
        explorer.resize(float(message["width"]), float(message["height"]))
    else:
        raise ValueError(f"Unknown message type: {kind}")


def create_app(corpus=None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        corpus: optional list of Publication records. When omitted the corpus
            is loaded on startup from BIOGRAPH_CORPUS_PATH or the corpus URL.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the corpus on server startup."""
        if app.state.corpus is None:
            app.state.corpus = await asyncio.to_thread(
                load_corpus, CORPUS_PATH, None if CORPUS_PATH else CORPUS_URL
            )
        yield

    app = FastAPI(title="NASA Bioscience Explorer", lifespan=lifespan)
    app.state.corpus = corpus

    static_dir = Path(__file__).resolve().parent / "static"

    def get_corpus():
        if app.state.corpus is None:
            raise HTTPException(status_code=503, detail="Corpus not loaded yet")
        return app.state.corpus

    def get_publication(publication_id):
        for pub in get_corpus():
            if pub.id == publication_id:
                return pub
        raise HTTPException(status_code=404, detail="Publication not found")

    @app.get("/", response_class=HTMLResponse)
    async def root():
        index_path = static_dir / "index.html"
        return HTMLResponse(content=index_path.read_text())

    @app.get("/api/publications")
    async def list_publications(search: str = "", category: str = "all",
                                organism: str = "all"):
        corpus = get_corpus()
        matches = filter_publications(corpus, search, category, organism)
        return {
            "total": len(corpus),
            "count": len(matches),
            "publications": [p.to_dict() for p in matches],
            "categories": sorted({p.category for p in corpus}),
            "organisms": sorted({p.organism for p in corpus}),
            "top_categories": [
                {"category": c, "count": n} for c, n in category_stats(corpus)
            ],
        }

    @app.get("/api/graph/{publication_id}")
    async def get_graph(publication_id: int, search: str = "",
                        hide: list[str] = Query(default=[]),
                        width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        publication = get_publication(publication_id)
        if not (0 < width <= MAX_CANVAS_SIZE and 0 < height <= MAX_CANVAS_SIZE):
            raise HTTPException(status_code=400, detail="Canvas size out of range")
        unknown = [h for h in hide if h not in NODE_KINDS]
        if unknown:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown node type(s): {', '.join(unknown)}"
            )

        explorer = Explorer(get_corpus(), bounds=(width, height))
        await asyncio.to_thread(explorer.focus, publication, False)
        explorer.set_search(search)
        for kind in hide:
            explorer.set_type_visible(kind, False)
        return explorer.frame()

    @app.post("/api/analyze/{publication_id}")
    async def analyze(publication_id: int):
        publication = get_publication(publication_id)
        try:
            from openai import OpenAI
            client = OpenAI()
        except Exception as e:
            logger.warning("OpenAI client unavailable: %s", e)
            analysis = fallback_analysis(publication, "Analysis service not configured")
        else:
            analysis = await asyncio.to_thread(analyze_publication, publication, client)
        return {
            "success": not analysis["error"],
            "publication": publication.to_dict(),
            "data": analysis,
        }

    @app.websocket("/ws/explore")
    async def explore(websocket: WebSocket):
        await websocket.accept()
        outbox: asyncio.Queue = asyncio.Queue()

        def on_frame(frame):
            outbox.put_nowait({"type": "frame", **frame})

        def on_selected(event):
            outbox.put_nowait({
                "type": "selected",
                "publication": event.publication.to_dict(),
            })
            explorer.focus(event.publication)

        explorer = Explorer(get_corpus(), on_frame=on_frame,
                            on_publication_selected=on_selected)

        async def _sender():
            while True:
                message = await outbox.get()
                await websocket.send_json(message)

        sender = asyncio.create_task(_sender())
        try:
            while True:
                text = await websocket.receive_text()
                try:
                    message = json.loads(text)
                    dispatch(explorer, message)
                except (KeyError, ValueError, TypeError) as e:
                    logger.debug("Rejected message %r: %s", text, e)
                    outbox.put_nowait({"type": "error", "message": str(e)})
        except WebSocketDisconnect:
            pass
        finally:
            explorer.dispose()
            sender.cancel()
            try:
                await sender
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug("WebSocket sender stopped: %s", e)

    return app


# Create the app instance for uvicorn
app = create_app()
