from click.testing import CliRunner

from workflowy_inbox.entry import cli
from workflowy_inbox.preference_store import PreferenceStore


def invoke(prefs_path, server, *args):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(prefs_path), *args], obj={"transport": server.transport})


def test_send_creates_bullet(prefs_path, server):
    result = invoke(prefs_path, server, "--api-key", "k", "--save-location", "https://wf/inbox",
                    "send", "Buy milk", "--note", "2%")

    assert result.exit_code == 0, result.output
    assert len(server.calls("GET")) == 1
    (body,) = server.posted()
    assert body["new_bullet_title"] == "Buy milk"
    assert body["new_bullet_note"] == "2%"
    assert body["save_location_url"] == "https://wf/inbox"
    assert server.calls("POST")[0].headers["Authorization"] == "Bearer k"


def test_send_uses_saved_preferences(prefs_path, server):
    PreferenceStore(prefs_path).save(api_key="saved", save_location_url="https://wf/saved")
    result = invoke(prefs_path, server, "send", "Buy milk")

    assert result.exit_code == 0, result.output
    assert server.calls("GET")[0].headers["Authorization"] == "Bearer saved"
    assert server.posted()[0]["new_bullet_note"] == ""


def test_send_fails_with_bad_key(prefs_path, server):
    server.me_status = 401
    result = invoke(prefs_path, server, "--api-key", "bad", "send", "Buy milk")

    assert result.exit_code == 1
    assert server.calls("POST") == []


def test_send_rejects_empty_title(prefs_path, server):
    result = invoke(prefs_path, server, "--api-key", "k", "send", "   ")

    assert result.exit_code == 2
    assert server.requests == []


def test_config_masks_api_key(prefs_path, server):
    PreferenceStore(prefs_path).save(api_key="abcdefghijklmnop")
    result = invoke(prefs_path, server, "config")

    assert result.exit_code == 0
    assert "abcdefghijklmnop" not in result.output
    assert "abcd" in result.output


def test_open_api_key_page(prefs_path, server, monkeypatch):
    launched = []
    monkeypatch.setattr("workflowy_inbox.entry.click.launch", lambda url: launched.append(url))
    result = invoke(prefs_path, server, "open", "api-key")

    assert result.exit_code == 0
    assert launched == ["https://workflowy.com/api-key/"]


def test_open_inbox_without_location_does_not_launch(prefs_path, server, monkeypatch):
    launched = []
    monkeypatch.setattr("workflowy_inbox.entry.click.launch", lambda url: launched.append(url))
    result = invoke(prefs_path, server, "open", "inbox")

    assert result.exit_code == 0
    assert launched == []
