import json

import httpx

from vision_chat.services.image_generation import ImageGenerationClient, extract_image_sources

PNG = "data:image/png;base64,"


def test_extract_openai_shape():
    data = {"data": [{"b64_json": "AAA"}, {"url": "https://img/1.png"}]}
    assert extract_image_sources(data) == [PNG + "AAA", "https://img/1.png"]


def test_extract_google_shape():
    data = {
        "imageUri": "gs://top",
        "images": [{"imageUri": "gs://a"}, {"url": "https://b"}, {"b64": "BBB"}],
    }
    assert extract_image_sources(data) == ["gs://top", "gs://a", "https://b", PNG + "BBB"]


def test_extract_generic_shape():
    data = {"base64": "CCC", "output": [{"imageUri": "https://c"}, {"b64_json": "DDD"}]}
    assert extract_image_sources(data) == [PNG + "CCC", "https://c", PNG + "DDD"]


def test_extract_bare_string():
    assert extract_image_sources("https://only") == ["https://only"]


def test_extract_unknown_shape_is_empty():
    assert extract_image_sources({"created": 1, "data": "oops"}) == []
    assert extract_image_sources(None) == []


def test_generate_uses_bearer_key_and_default_model(mock_http):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [{"b64_json": "EEE"}]})

    client = ImageGenerationClient(
        ["img-key"],
        endpoint="https://images.test/v1/images/generations",
        model="test-model",
        http_client=mock_http(handler),
    )
    images, result = client.generate("a red fox", size="512x512")

    assert images == [PNG + "EEE"]
    assert result.key_index == 0
    assert seen[0].headers["Authorization"] == "Bearer img-key"
    assert json.loads(seen[0].content) == {
        "prompt": "a red fox",
        "size": "512x512",
        "n": 1,
        "model": "test-model",
    }


def test_generate_rotates_on_server_error(mock_http):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers["Authorization"] == "Bearer k1":
            return httpx.Response(500, text="internal")
        return httpx.Response(200, json={"data": [{"url": "https://ok"}]})

    client = ImageGenerationClient(
        ["k1", "k2"], endpoint="https://images.test/gen", http_client=mock_http(handler)
    )
    images, result = client.generate("cat", model="other")

    assert images == ["https://ok"]
    assert result.key_index == 1
    assert len(result.attempts) == 1
