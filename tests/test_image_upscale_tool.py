from __future__ import annotations

import pytest
from helpers import Reply, StubVenice

from venice_ai_tools.adapters.base import BinaryDataMissingError, ErrorKind, ParameterValidationError, ToolExecutionError
from venice_ai_tools.adapters.tools.image_upscale import VeniceImageUpscaleTool
from venice_ai_tools.core.items import BinaryAttachment, Item
from venice_ai_tools.core.parameters import ItemParameters

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _image_item(**attachment_kwargs) -> Item:
    attachment = BinaryAttachment(data=PNG_BYTES, **attachment_kwargs)
    return Item(json={}, binary={"data": attachment})


def test_upscale_without_binary_raises_before_request(make_context):
    stub = StubVenice()

    with pytest.raises(ToolExecutionError) as excinfo:
        VeniceImageUpscaleTool().execute([Item(json={"name": "no image"})], make_context({}, stub=stub))

    error = excinfo.value
    assert error.item_index == 0
    assert error.kind == ErrorKind.BINARY_MISSING
    assert isinstance(error.__cause__, ParameterValidationError)
    assert stub.requests == []


def test_upscale_missing_property_names_it():
    item = Item(binary={"other": BinaryAttachment(data=b"x")})

    with pytest.raises(BinaryDataMissingError) as excinfo:
        VeniceImageUpscaleTool().build_request({"binary_property": "data", "scale": 2, "options": {}}, item, 3)

    assert '"data"' in str(excinfo.value)
    assert excinfo.value.item_index == 3


def test_upscale_form_fields_are_stringified():
    request = VeniceImageUpscaleTool().build_request(
        {"binary_property": "data", "scale": 4, "options": {"enhance": True, "enhance_creativity": 0.5, "enhance_prompt": "sharpen"}},
        _image_item(file_name="fox.jpg", mime_type="image/jpeg"),
        0,
    )

    assert request.form_data == {"scale": "4", "enhance": "true", "enhanceCreativity": "0.5", "prompt": "sharpen"}
    assert request.files["image"] == ("fox.jpg", PNG_BYTES, "image/jpeg")
    assert request.binary_response is True


def test_upscale_defaults_file_name_and_mime_type():
    request = VeniceImageUpscaleTool().build_request({"binary_property": "data", "scale": 2, "options": {}}, _image_item(), 0)

    assert request.form_data == {"scale": "2"}
    assert request.files["image"] == ("image", PNG_BYTES, "image/png")


def test_upscale_wraps_response_bytes(make_context):
    stub = StubVenice(Reply(content=b"UPSCALED", headers={"content-type": "image/webp"}))

    [results] = VeniceImageUpscaleTool().execute(
        [_image_item(file_name="fox.png", mime_type="image/png")],
        make_context({"scale": 2}, stub=stub),
    )

    result = results[0]
    assert result.json == {"success": True, "scale": 2, "enhance": False}
    attachment = result.binary["data"]
    assert attachment.data == b"UPSCALED"
    assert attachment.file_name == "upscaled_fox.png"
    assert attachment.mime_type == "image/webp"

    [request] = stub.requests
    assert request.url.path == "/api/v1/image/upscale"
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="scale"' in request.content
    assert b'filename="fox.png"' in request.content
    assert PNG_BYTES in request.content


def test_upscale_unresolved_scale_falls_back_to_default(make_context):
    stub = StubVenice(Reply(content=b"UPSCALED", headers={"content-type": "image/png"}))
    context = make_context(stub=stub, source=ItemParameters({"scale": "{{ factor }}"}))

    [results] = VeniceImageUpscaleTool().execute([_image_item(file_name="fox.png")], context)

    assert results[0].json["scale"] == 2
    assert b'name="scale"\r\n\r\n2\r\n' in stub.requests[0].content
    assert b"None" not in stub.requests[0].content
