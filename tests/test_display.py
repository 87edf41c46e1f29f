from workflowy_inbox.controller import NotificationKind
from workflowy_inbox.display import mask_secret, notify


def test_mask_secret():
    assert mask_secret("") == "(not set)"
    assert mask_secret("short") == "*****"
    assert mask_secret("abcdefghijklmnop") == "abcd********mnop"


def test_failure_notification_shows_message(capsys):
    notify(NotificationKind.FAILURE, "Error", "rate limited")
    out = capsys.readouterr().out
    assert "Error" in out
    assert "rate limited" in out


def test_progress_notification_is_a_single_line(capsys):
    notify(NotificationKind.ANIMATED, "Sending to Workflowy...")
    out = capsys.readouterr().out
    assert out.strip() == "… Sending to Workflowy..."
