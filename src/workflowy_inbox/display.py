from typing import Optional
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

from workflowy_inbox.controller import NotificationKind

# ========== UI Theme ==========
console = Console(theme=Theme({
    "info": "bold cyan",
    "warn": "bold yellow",
}))

# border colour of the panel each notification kind is printed in
KIND_STYLES = {
    NotificationKind.SUCCESS: "green",
    NotificationKind.FAILURE: "red",
}


def show_panel(title: str, msg: str, border: str):
    console.print(Panel.fit(Text(msg, no_wrap=False), title=title, border_style=border))


def warn_panel(title: str, msg: str):
    show_panel(title, msg, border="yellow")


def notify(kind: NotificationKind, title: str, message: Optional[str] = None):
    """Print a status line for progress, a coloured panel for the outcome."""
    if kind is NotificationKind.ANIMATED:
        console.print(f"[info]… {title}[/info]" + (f" {message}" if message else ""))
        return
    show_panel(title, message or "", border=KIND_STYLES[kind])


def mask_secret(value: str) -> str:
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"
