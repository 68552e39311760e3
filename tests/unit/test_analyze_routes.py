from __future__ import annotations

import base64

from snapshelf.services.errors import ModelServiceError, RateLimitedError

IMAGE_BLOCK = {
    "type": "image",
    "source": {"type": "base64", "media_type": "image/jpeg", "data": base64.b64encode(b"jpeg").decode()},
}
PROMPT_BLOCK = {"type": "text", "text": "Extract the recipe as JSON."}


class TestAnalyze:
    def test_forwards_blocks_as_one_user_turn(self, client, model) -> None:
        model.reply = '{"title": "Scones", "ingredients": [], "instructions": []}'

        response = client.post("/api/analyze", json={"content": [IMAGE_BLOCK, PROMPT_BLOCK]})

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == [{"type": "text", "text": model.reply}]
        assert body["model"] == "gemini-test"
        assert body["stop_reason"] == "stop"

        (turns, max_tokens), = model.calls
        assert max_tokens == 4000
        assert turns[0]["role"] == "user"
        assert [block["type"] for block in turns[0]["content"]] == ["image", "text"]
        assert turns[0]["content"][0]["source"]["media_type"] == "image/jpeg"

    def test_custom_max_tokens(self, client, model) -> None:
        response = client.post("/api/analyze", json={"content": [PROMPT_BLOCK], "max_tokens": 500})
        assert response.status_code == 200
        assert model.calls[0][1] == 500

    def test_missing_content(self, client, model) -> None:
        response = client.post("/api/analyze", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}
        assert model.calls == []

    def test_empty_content(self, client, model) -> None:
        response = client.post("/api/analyze", json={"content": []})
        assert response.status_code == 400
        assert model.calls == []

    def test_unknown_block_type(self, client, model) -> None:
        response = client.post("/api/analyze", json={"content": [{"type": "audio", "data": "x"}]})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}
        assert model.calls == []

    def test_rate_limited(self, client, model) -> None:
        model.error = RateLimitedError()
        response = client.post("/api/analyze", json={"content": [PROMPT_BLOCK]})
        assert response.status_code == 429
        assert "rate limit" in response.json()["error"].lower()

    def test_upstream_failure_keeps_status(self, client, model) -> None:
        model.error = ModelServiceError("overloaded", status_code=503)
        response = client.post("/api/analyze", json={"content": [PROMPT_BLOCK]})
        assert response.status_code == 503
        assert response.json() == {"error": "overloaded"}

    def test_unexpected_failure(self, client, model) -> None:
        model.error = RuntimeError("socket closed")
        response = client.post("/api/analyze", json={"content": [PROMPT_BLOCK]})
        assert response.status_code == 500
        assert response.json() == {"error": "socket closed"}

    def test_wrong_method(self, client) -> None:
        response = client.get("/api/analyze")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
