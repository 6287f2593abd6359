import json
import logging

import httpx
import pytest

from intro.core.i18n import (
    Region,
    TranslationLoadError,
    fallback_translations,
    load_translations,
    lookup,
    page_title,
    translation_path,
    validate_dictionary,
)
from intro.infra.sources import FileTranslationSource, HttpTranslationSource


def test_region_parse_and_other():
    assert Region.parse("MY") is Region.MY
    assert Region.parse(Region.SG) is Region.SG
    for bad in (None, "", "sg", "ID", 1):
        assert Region.parse(bad) is None
    assert Region.MY.other is Region.SG
    assert Region.SG.other.other is Region.SG


def test_resource_naming_and_titles():
    assert translation_path(Region.SG) == "components/i18n-zh-sg.json"
    assert translation_path(Region.MY) == "components/i18n-zh-my.json"
    assert page_title(Region.SG) == "自介 (华文，新加坡)"
    assert page_title(Region.MY) == "自介 (华文，马来西亚)"


def test_fallback_is_builtin_sg_dictionary_and_a_copy():
    strings = fallback_translations()
    assert strings["greeting"] == "Hi，初次见面～ (◕‿◕✿)"
    assert strings["friendWish"].startswith("希望和你成为Kaki")
    strings["greeting"] = "changed"
    assert fallback_translations()["greeting"] != "changed"


def test_validate_dictionary():
    assert validate_dictionary({"a": "x", "b": 3, "c": None}) == {"a": "x"}
    with pytest.raises(TranslationLoadError):
        validate_dictionary(["not", "a", "dict"])


def test_lookup():
    strings = {"a": "x", "empty": ""}
    assert lookup(strings, "a") == "x"
    assert lookup(strings, "missing") is None
    assert lookup(strings, "empty") is None
    assert lookup(None, "a") is None
    assert lookup(strings, None) is None


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://intro.example/")


@pytest.mark.asyncio
async def test_http_source_fetches_region_file():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"greeting": "Hai MY"})

    async with _mock_client(handler) as client:
        strings = await load_translations(HttpTranslationSource(client), Region.MY)

    assert strings == {"greeting": "Hai MY"}
    assert seen == ["/components/i18n-zh-my.json"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, text="missing"),
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="{not json"),
        httpx.Response(200, json=["a", "list"]),
    ],
)
async def test_http_failures_fall_back(response, caplog):
    async with _mock_client(lambda request: response) as client:
        with caplog.at_level(logging.ERROR, logger="intro.core.i18n"):
            strings = await load_translations(HttpTranslationSource(client), Region.SG)

    assert strings == fallback_translations()
    assert any("Failed to load translations" in r.message for r in caplog.records)


@pytest.mark.asyncio
async def test_network_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async with _mock_client(handler) as client:
        strings = await load_translations(HttpTranslationSource(client), Region.SG)
    assert strings["greeting"] == fallback_translations()["greeting"]


@pytest.mark.asyncio
async def test_my_failure_still_uses_sg_fallback(caplog):
    async with _mock_client(lambda request: httpx.Response(503)) as client:
        with caplog.at_level(logging.WARNING, logger="intro.core.i18n"):
            strings = await load_translations(HttpTranslationSource(client), Region.MY)
    assert strings == fallback_translations()
    assert any("Falling back to SG strings" in r.message for r in caplog.records)


@pytest.mark.asyncio
async def test_file_source(tmp_path):
    components = tmp_path / "components"
    components.mkdir()
    (components / "i18n-zh-sg.json").write_text(json.dumps({"greeting": "你好"}, ensure_ascii=False), encoding="utf-8")

    source = FileTranslationSource(tmp_path)
    assert await load_translations(source, Region.SG) == {"greeting": "你好"}
    # No MY file on disk
    assert await load_translations(source, Region.MY) == fallback_translations()
