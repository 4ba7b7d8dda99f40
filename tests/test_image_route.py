import base64

import httpx
import pytest

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-payload\xff\xd9"


@pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": None}])
def test_missing_prompt_is_rejected_without_outbound_call(client, stability, body):
    stability.handler = lambda request: httpx.Response(200, content=JPEG_BYTES)

    resp = client.post("/generate-image", json=body)

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert stability.requests == []


def test_success_returns_jpeg_data_uri(client, stability):
    stability.handler = lambda request: httpx.Response(200, content=JPEG_BYTES)

    resp = client.post("/generate-image", json={"prompt": "a lighthouse at dusk"})

    assert resp.status_code == 200
    image = resp.json()["image"]
    prefix = "data:image/jpeg;base64,"
    assert image.startswith(prefix)
    assert base64.b64decode(image[len(prefix):]) == JPEG_BYTES


def test_outbound_request_is_multipart_with_bearer_auth(client, stability):
    stability.handler = lambda request: httpx.Response(200, content=JPEG_BYTES)

    client.post("/generate-image", json={"prompt": "a lighthouse at dusk"})

    assert len(stability.requests) == 1
    request = stability.requests[0]
    assert request.method == "POST"
    assert request.headers["authorization"] == "Bearer test-stability-key"
    assert request.headers["accept"] == "image/*"
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="prompt"' in request.content
    assert b"a lighthouse at dusk" in request.content
    assert b'name="output_format"' in request.content
    assert b"jpeg" in request.content


@pytest.mark.parametrize("status", [400, 403, 422, 500])
def test_provider_error_status_and_first_message_pass_through(client, stability, status):
    stability.handler = lambda request: httpx.Response(
        status, json={"name": "bad_request", "errors": ["prompt is too short", "second"]}
    )

    resp = client.post("/generate-image", json={"prompt": "x"})

    assert resp.status_code == status
    assert resp.json() == {"error": "prompt is too short"}


@pytest.mark.parametrize(
    "content",
    [b"not json at all", b'{"errors": []}', b'{"message": "no errors key"}', b"[1, 2]"],
)
def test_unparsable_provider_error_is_generic(client, stability, content):
    stability.handler = lambda request: httpx.Response(502, content=content)

    resp = client.post("/generate-image", json={"prompt": "x"})

    assert resp.status_code == 502
    assert resp.json() == {"error": "Unknown error occurred."}


def test_transport_failure_maps_to_generic_server_error(client, stability):
    def boom(request):
        raise httpx.ConnectError("connection refused to 10.0.0.1", request=request)

    stability.handler = boom

    resp = client.post("/generate-image", json={"prompt": "x"})

    assert resp.status_code == 500
    body = resp.json()
    assert body == {"error": "A server error occurred."}
    assert "10.0.0.1" not in resp.text


def test_unexpected_generator_failure_maps_to_generic_server_error(client, app):
    class BrokenGenerator:
        async def generate(self, prompt):
            raise KeyError("internal bookkeeping detail")

    app.state.image_generator = BrokenGenerator()

    resp = client.post("/generate-image", json={"prompt": "x"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "A server error occurred."}
    assert "bookkeeping" not in resp.text
