import httpx
import pytest

from app.errors import ConfigurationError, ModelUnavailable, NoCandidates
from app.services.gemini_client import GeminiClient


@pytest.mark.unit
@pytest.mark.asyncio
async def test_request_shape_and_parsed_analysis(gemini_client, gemini_transport, make_gemini_response):
    gemini_transport.queue(200, make_gemini_response({"summary": "Great fit", "strengths": ["Grit"]}))

    analysis = await gemini_client.analyze("PROMPT")

    assert analysis.summary == "Great fit"
    assert analysis.model == "gemini-test"

    call = gemini_transport.calls[0]
    assert call["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
    assert call["params"] == {"key": "test-key"}
    assert call["body"]["contents"][0]["parts"][0]["text"] == "PROMPT"
    assert call["body"]["generationConfig"] == {
        "temperature": 0.2,
        "topP": 0.9,
        "topK": 32,
        "maxOutputTokens": 3000,
        "responseMimeType": "application/json",
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_api_key_is_a_configuration_error(gemini_transport):
    client = GeminiClient(api_key="", base_url="https://gemini.test", fetcher=gemini_transport)

    with pytest.raises(ConfigurationError) as exc_info:
        await client.generate("PROMPT")

    assert exc_info.value.status_code == 500
    assert gemini_transport.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_base_url_is_a_configuration_error(gemini_transport):
    client = GeminiClient(api_key="k", base_url="", fetcher=gemini_transport)

    with pytest.raises(ConfigurationError):
        await client.generate("PROMPT")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_rate_limit_is_passed_through(gemini_client, gemini_transport):
    gemini_transport.queue(429, {"error": {"status": "RESOURCE_EXHAUSTED"}}, {"Retry-After": "30"})

    with pytest.raises(ModelUnavailable) as exc_info:
        await gemini_client.generate("PROMPT")

    assert exc_info.value.status_code == 429
    assert exc_info.value.status == 429
    assert "rate limit" in str(exc_info.value)
    assert exc_info.value.body == {"error": {"status": "RESOURCE_EXHAUSTED"}}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_server_error_maps_to_bad_gateway(gemini_client, gemini_transport):
    gemini_transport.queue(503, "upstream unavailable")

    with pytest.raises(ModelUnavailable) as exc_info:
        await gemini_client.generate("PROMPT")

    assert exc_info.value.status_code == 502
    assert exc_info.value.details == {"status": 503, "body": "upstream unavailable"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_network_error_is_model_unavailable(gemini_client, gemini_transport):
    gemini_transport.responses.append(httpx.ConnectError("connection refused"))

    with pytest.raises(ModelUnavailable) as exc_info:
        await gemini_client.generate("PROMPT")

    assert exc_info.value.status is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_blocked_prompt_surfaces_parser_error(gemini_client, gemini_transport):
    gemini_transport.queue(200, {"promptFeedback": {"blockReason": "OTHER"}})

    with pytest.raises(NoCandidates):
        await gemini_client.analyze("PROMPT")
