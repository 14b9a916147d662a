from __future__ import annotations

from unittest.mock import MagicMock

from helpers import Reply, StubVenice, json_response

from venice_ai_tools.adapters.tools.chat import VeniceChatTool, build_messages
from venice_ai_tools.core.items import Item


def _build(tool: VeniceChatTool, **params):
    resolved = {"message": "Hi", "model": "llama-3.3-70b", "options": {}}
    resolved.update(params)
    return tool.build_request(resolved, Item(), 0)


def test_chat_without_system_prompt_sends_single_user_message():
    request = _build(VeniceChatTool())

    assert request.method == "POST"
    assert request.path == "/chat/completions"
    assert request.json_body["messages"] == [{"role": "user", "content": "Hi"}]


def test_chat_system_prompt_is_prepended():
    request = _build(VeniceChatTool(), options={"system_prompt": "Be terse."})

    messages = request.json_body["messages"]
    assert len(messages) == 2
    assert messages[0] == {"role": "system", "content": "Be terse."}
    assert messages[1]["role"] == "user"


def test_chat_empty_system_prompt_is_ignored():
    assert build_messages("Hi", "") == [{"role": "user", "content": "Hi"}]


def test_chat_applies_defaults():
    body = _build(VeniceChatTool()).json_body

    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 1000
    assert body["venice_parameters"] == {"enable_web_search": "auto", "include_venice_system_prompt": False}


def test_chat_keeps_zero_temperature_and_adds_character():
    body = _build(VeniceChatTool(), options={"temperature": 0, "character_id": "alan-watts", "enable_web_search": "off"}).json_body

    assert body["temperature"] == 0
    assert body["venice_parameters"]["character_id"] == "alan-watts"
    assert body["venice_parameters"]["enable_web_search"] == "off"


def test_chat_execute_extracts_first_choice(make_context):
    client = MagicMock()
    client.send.return_value = json_response(
        {
            "choices": [{"message": {"role": "assistant", "content": "Hello there"}}],
            "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
        }
    )
    tool = VeniceChatTool(client=client)

    [results] = tool.execute([Item()], make_context({"message": "Hi"}))

    assert results[0].json == {
        "success": True,
        "model": "llama-3.3-70b",
        "input": "Hi",
        "output": "Hello there",
        "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
    }
    assert results[0].paired_item == 0
    client.send.assert_called_once()


def test_chat_missing_choices_yields_empty_output(make_context):
    client = MagicMock()
    client.send.return_value = json_response({"choices": []})

    [results] = VeniceChatTool(client=client).execute([Item()], make_context({"message": "Hi"}))

    assert results[0].json["output"] == ""
    assert results[0].json["usage"] is None


def test_chat_request_on_the_wire(make_context):
    stub = StubVenice(Reply(json={"choices": [{"message": {"content": "ok"}}]}))

    VeniceChatTool().execute([Item()], make_context({"message": "Hi", "model": "qwen-2.5-72b"}, stub=stub))

    [request] = stub.requests
    assert str(request.url) == "https://api.venice.ai/api/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert stub.json_body()["model"] == "qwen-2.5-72b"
