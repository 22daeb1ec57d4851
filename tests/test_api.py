"""Tests for web.app — FastAPI endpoints and WebSocket."""

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient


@pytest.fixture
def app(sample_corpus):
    """Create a fresh FastAPI app for each test."""
    from web.app import create_app

    return create_app(corpus=sample_corpus)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def receive_until(ws, message_type, limit=5000):
    """Read messages until one of ``message_type`` arrives."""
    for _ in range(limit):
        message = ws.receive_json()
        if message["type"] == message_type:
            return message
    raise AssertionError(f"no {message_type} message received")


@pytest.mark.asyncio
async def test_root_serves_html(client):
    """GET / should serve the index.html page."""
    response = await client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "Bioscience Explorer" in response.text


@pytest.mark.asyncio
async def test_list_publications(client):
    response = await client.get("/api/publications")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 7
    assert data["count"] == 7
    assert "Plant Biology" in data["categories"]
    assert data["top_categories"][0] == {"category": "Bone & Musculoskeletal", "count": 2}


@pytest.mark.asyncio
async def test_list_publications_filtered(client):
    response = await client.get("/api/publications",
                                params={"search": "space", "organism": "Human"})
    data = response.json()
    assert [p["id"] for p in data["publications"]] == [1, 4, 7]
    assert data["total"] == 7


@pytest.mark.asyncio
async def test_graph_snapshot(client):
    response = await client.get("/api/graph/1")
    assert response.status_code == 200
    frame = response.json()
    assert frame["focus"] == 1
    assert frame["placeholder"] is False
    assert frame["settled"] is True
    assert frame["counts"]["publication"] == 6
    ids = {n["id"] for n in frame["nodes"]}
    for link in frame["links"]:
        assert link["source"] in ids and link["target"] in ids


@pytest.mark.asyncio
async def test_graph_hide_and_search(client):
    response = await client.get("/api/graph/1",
                                params={"hide": ["author"], "search": "bone"})
    frame = response.json()
    assert {n["type"] for n in frame["nodes"]} <= {"publication", "concept"}
    assert "pub_1" in {n["id"] for n in frame["nodes"]}


@pytest.mark.asyncio
async def test_graph_unknown_publication(client):
    response = await client.get("/api/graph/999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_graph_rejects_unknown_type(client):
    response = await client.get("/api/graph/1", params={"hide": ["journal"]})
    assert response.status_code == 400
    assert "journal" in response.json()["detail"]


@pytest.mark.asyncio
async def test_graph_rejects_bad_size(client):
    response = await client.get("/api/graph/1", params={"width": 0})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_analyze(client, mock_openai_client):
    with patch("openai.OpenAI", return_value=mock_openai_client):
        response = await client.post("/api/analyze/1")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["publication"]["id"] == 1
    assert data["data"]["summary"] == "Studies bone loss in microgravity."


@pytest.mark.asyncio
async def test_analyze_client_unavailable(client):
    with patch("openai.OpenAI", side_effect=RuntimeError("missing api key")):
        response = await client.post("/api/analyze/1")
    data = response.json()
    assert data["success"] is False
    assert data["data"]["error"] is True


@pytest.mark.asyncio
async def test_analyze_unknown_publication(client):
    response = await client.post("/api/analyze/999")
    assert response.status_code == 404


def test_websocket_streams_frames(app):
    with TestClient(app) as tc:
        with tc.websocket_connect("/ws/explore") as ws:
            ws.send_json({"type": "focus", "publication_id": 1})
            frame = receive_until(ws, "frame")
            assert frame["focus"] == 1
            assert frame["nodes"]

            ws.send_json({"type": "toggle", "node_type": "author", "visible": False})
            while True:
                frame = receive_until(ws, "frame")
                if not any(n["type"] == "author" for n in frame["nodes"]):
                    break


def test_websocket_click_selects_and_refocuses(app):
    with TestClient(app) as tc:
        with tc.websocket_connect("/ws/explore") as ws:
            ws.send_json({"type": "focus", "publication_id": 1})
            receive_until(ws, "frame")

            ws.send_json({"type": "click", "node_id": "pub_3"})
            selected = receive_until(ws, "selected")
            assert selected["publication"]["id"] == 3

            frame = receive_until(ws, "frame")
            assert frame["focus"] == 3


def test_websocket_reports_errors(app):
    with TestClient(app) as tc:
        with tc.websocket_connect("/ws/explore") as ws:
            ws.send_json({"type": "teleport"})
            error = receive_until(ws, "error")
            assert "teleport" in error["message"]

            ws.send_json({"type": "focus", "publication_id": 999})
            error = receive_until(ws, "error")
            assert "999" in error["message"]


def test_websocket_rejects_non_object_messages(app):
    with TestClient(app) as tc:
        with tc.websocket_connect("/ws/explore") as ws:
            ws.send_json(["not", "an", "object"])
            error = receive_until(ws, "error")
            assert "JSON object" in error["message"]

            # the connection stays usable after a rejected message
            ws.send_json({"type": "focus", "publication_id": 1})
            frame = receive_until(ws, "frame")
            assert frame["focus"] == 1


def test_websocket_rejects_invalid_json(app):
    with TestClient(app) as tc:
        with tc.websocket_connect("/ws/explore") as ws:
            ws.send_text("{not json")
            receive_until(ws, "error")

            ws.send_json({"type": "search", "term": "bone"})
            frame = receive_until(ws, "frame")
            assert frame["placeholder"] is True


class TestDispatch:
    def test_rejects_non_object(self, sample_corpus):
        from biograph.interaction import Explorer
        from web.app import dispatch

        with pytest.raises(ValueError):
            dispatch(Explorer(sample_corpus), ["focus", 1])

    def test_rejects_unknown_type(self, sample_corpus):
        from biograph.interaction import Explorer
        from web.app import dispatch

        with pytest.raises(ValueError):
            dispatch(Explorer(sample_corpus), {"type": "teleport"})
