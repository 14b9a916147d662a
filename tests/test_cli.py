from __future__ import annotations

import json

import pytest
from helpers import Reply, StubVenice
from typer.testing import CliRunner

from venice_ai_tools.adapters.api.venice import VeniceClient
from venice_ai_tools.cli.inputs import InputError, load_items, parse_assignments
from venice_ai_tools.cli.main import app


def invoke(cli_runner: CliRunner, args: list[str]):
    return cli_runner.invoke(app, args)


def _json_output(output: str):
    lines = output.splitlines()
    start = next(index for index, line in enumerate(lines) if line in ("[", "[]"))
    return json.loads("\n".join(lines[start:]))


@pytest.fixture()
def stub_client(monkeypatch):
    """Route every client the CLI builds through a recording stub."""

    holder: dict[str, StubVenice] = {}

    def _install(*replies) -> StubVenice:
        stub = StubVenice(*replies)
        holder["stub"] = stub
        monkeypatch.setattr(
            VeniceClient,
            "from_credential",
            lambda credential, transport=None: VeniceClient(api_key=credential.api_key, transport=stub.transport),
        )
        return stub

    monkeypatch.setenv("VENICE_API_KEY", "cli-key")
    return _install


def test_tools_list(cli_runner):
    result = invoke(cli_runner, ["tools", "list"])

    assert result.exit_code == 0
    assert "venice_chat" in result.stdout
    assert "venice_text_to_speech" in result.stdout


def test_tools_describe_json(cli_runner):
    result = invoke(cli_runner, ["tools", "describe", "venice_image_upscale", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["name"] == "veniceImageUpscaleTool"
    assert [item["name"] for item in payload["properties"]] == ["binary_property", "scale", "options"]


def test_tools_describe_unknown_tool(cli_runner):
    result = invoke(cli_runner, ["tools", "describe", "venice_video"])

    assert result.exit_code == 1


def test_run_chat_with_dotted_options(cli_runner, stub_client):
    stub = stub_client(Reply(json={"choices": [{"message": {"content": "Hi there"}}]}))

    result = invoke(cli_runner, ["run", "venice_chat", "-p", "message=Hello", "-p", "options.temperature=0.2"])

    assert result.exit_code == 0, result.output
    [record] = _json_output(result.stdout)
    assert record["json"]["output"] == "Hi there"
    assert record["pairedItem"] == {"item": 0}
    assert stub.json_body()["temperature"] == 0.2
    assert stub.requests[0].headers["Authorization"] == "Bearer cli-key"


def test_run_items_file_with_templates(cli_runner, stub_client, tmp_path):
    stub = stub_client(Reply(json={"data": [[0.1, 0.2]]}))
    items_file = tmp_path / "items.yaml"
    items_file.write_text("- text: hello\n- text: world\n", encoding="utf-8")

    result = invoke(cli_runner, ["run", "venice_embeddings", "-p", "input={{ text }}", "--items", str(items_file)])

    assert result.exit_code == 0, result.output
    records = _json_output(result.stdout)
    assert [record["json"]["inputLength"] for record in records] == [5, 5]
    assert [stub.json_body(index)["input"] for index in range(2)] == ["hello", "world"]


def test_run_aborts_with_item_index(cli_runner, stub_client, tmp_path):
    stub = stub_client(Reply(json={"choices": []}))
    items_file = tmp_path / "items.json"
    items_file.write_text(json.dumps([{"q": "one"}, {"q": ""}, {"q": "three"}]), encoding="utf-8")

    result = invoke(cli_runner, ["run", "venice_chat", "-p", "message={{ q }}", "--items", str(items_file)])

    assert result.exit_code == 1
    assert "Item 1 failed (validation)" in result.output
    assert len(stub.requests) == 1


def test_run_continue_on_fail(cli_runner, stub_client, tmp_path):
    stub_client(Reply(json={"choices": [{"message": {"content": "ok"}}]}))
    items_file = tmp_path / "items.json"
    items_file.write_text(json.dumps([{"q": "one"}, {"q": ""}]), encoding="utf-8")

    result = invoke(cli_runner, ["run", "venice_chat", "-p", "message={{ q }}", "--items", str(items_file), "--continue-on-fail"])

    assert result.exit_code == 0, result.output
    records = _json_output(result.stdout)
    assert records[0]["json"]["output"] == "ok"
    assert records[1]["json"] == {"error": "The parameter 'Message' is required."}


def test_run_upscale_writes_attachment(cli_runner, stub_client, tmp_path):
    stub_client(Reply(content=b"BIGGER", headers={"content-type": "image/png"}))
    (tmp_path / "fox.png").write_bytes(b"\x89PNG small")
    items_file = tmp_path / "items.yaml"
    items_file.write_text("- json: {}\n  binary:\n    data:\n      path: fox.png\n      mime_type: image/png\n", encoding="utf-8")
    output_dir = tmp_path / "out"

    result = invoke(cli_runner, ["run", "venice_image_upscale", "-p", "scale=4", "--items", str(items_file), "--output-dir", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert (output_dir / "0_upscaled_fox.png").read_bytes() == b"BIGGER"


def test_run_without_credentials(cli_runner, monkeypatch, tmp_path):
    monkeypatch.delenv("VENICE_API_KEY", raising=False)
    secrets = tmp_path / "secret.toml"
    secrets.write_text("[venice]\n", encoding="utf-8")

    result = invoke(cli_runner, ["--secrets", str(secrets), "run", "venice_list_models"])

    assert result.exit_code == 2
    assert "credentials" in result.output


def test_verify_reports_success(cli_runner, stub_client):
    stub_client(Reply(json={"data": [{"id": "llama-3.3-70b"}]}))

    result = invoke(cli_runner, ["verify"])

    assert result.exit_code == 0, result.output
    assert "Venice API reachable." in result.stdout


def test_parse_assignments_builds_nested_values():
    parsed = parse_assignments(["message=Hi", "options.temperature=0", "options.enable_web_search=off", "options.system_prompt=a: b"])

    assert parsed == {"message": "Hi", "options": {"temperature": 0, "enable_web_search": "off", "system_prompt": "a: b"}}


@pytest.mark.parametrize("entry", ["message", "options.=1", "message=Hi,message.sub=2"])
def test_parse_assignments_rejects_malformed_entries(entry):
    with pytest.raises(InputError):
        parse_assignments(entry.split(","))


def test_load_items_defaults_to_single_empty_item():
    [item] = load_items(None)

    assert item.json == {}
    assert item.binary == {}


def test_load_items_rejects_missing_attachment(tmp_path):
    items_file = tmp_path / "items.yaml"
    items_file.write_text("- binary:\n    data: missing.png\n", encoding="utf-8")

    with pytest.raises(InputError):
        load_items(items_file)


def test_run_keeps_numeric_looking_text(cli_runner, stub_client):
    stub = stub_client(Reply(json={"choices": [{"message": {"content": "ok"}}]}))

    result = invoke(cli_runner, ["run", "venice_chat", "-p", "message=42", "-p", "options.max_tokens=50"])

    assert result.exit_code == 0, result.output
    body = stub.json_body()
    assert body["messages"] == [{"role": "user", "content": "42"}]
    assert body["max_tokens"] == 50
