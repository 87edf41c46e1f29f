#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import asyncio
import logging
import signal
import click
from typing import Optional
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.application.current import get_app

from rich.panel import Panel
from rich.text import Text

from workflowy_inbox.key_manager import (
    KeyBindingManager,
    SessionFactory,
    SEND_AND_CLOSE,
    SEND_AND_CONTINUE,
    OPEN_API_KEY_PAGE,
    OPEN_SAVE_LOCATION,
    OPEN_PREFERENCES,
)
from workflowy_inbox.client import HttpClient
from workflowy_inbox.controller import CLOSE_DELAY_SECONDS, SubmissionController
from workflowy_inbox.errors import ValidationError
from workflowy_inbox.logger import configure_logging
from workflowy_inbox.utils import API_KEY_PAGE_URL, Config, SubmissionInput, require_title
from workflowy_inbox.display import console, notify, warn_panel, mask_secret

logger = logging.getLogger(__name__)


# ========== External links ==========
def open_api_key_page(cfg: Config):
    click.launch(API_KEY_PAGE_URL)


def open_save_location(cfg: Config):
    url = cfg.credentials().save_location_url
    if not url:
        warn_panel("Save location", "No save location url set. Use --save-location or open preferences.")
        return
    click.launch(url)


def open_preferences(cfg: Config):
    path = cfg.store.ensure()
    click.edit(filename=str(path))


LINKS = {
    OPEN_API_KEY_PAGE: open_api_key_page,
    OPEN_SAVE_LOCATION: open_save_location,
    OPEN_PREFERENCES: open_preferences,
}


# ========== Application Orchestrator ==========
class App:
    def __init__(self, cfg: Config, http: Optional[HttpClient] = None, close_delay: float = CLOSE_DELAY_SECONDS):
        self.cfg = cfg
        self.http = http or HttpClient(cfg)
        self.controller = SubmissionController(
                self.http, cfg.credentials, notify, close=self._close, close_delay=close_delay,
        )
        self._closing = False

        def submit(action: str):
            app = get_app()
            app.exit(result=(action, app.current_buffer.text))

        def clear():
            get_app().exit(exception=KeyboardInterrupt())

        links = {name: self._link_callback(func) for name, func in LINKS.items()}
        self.kbm = KeyBindingManager(submit_callback=submit, clear_callback=clear, link_callbacks=links)
        self.title_session = SessionFactory.build_title_session(self.kbm.title_bindings)
        self.session = SessionFactory.build_session(self.kbm.bindings)
        self.counter = 1

    def run(self):
        self._print_banner()
        asyncio.run(self._run())

    async def _run(self):
        form = self.controller.form
        while not self._closing:
            try:
                title = await self.title_session.prompt_async(
                        SessionFactory.make_prompt_fragments(self.counter, "Bullet"),
                        default=form.title,
                )
                form.set(title=title)
                result = await self.session.prompt_async(
                        SessionFactory.make_prompt_fragments(self.counter, "Note"),
                        default=form.note,
                )
                action, note = result if isinstance(result, tuple) else (SEND_AND_CONTINUE, result)
                form.set(note=note)
                if await self._handle_submit(action):
                    self.counter += 1
            except KeyboardInterrupt:
                console.print("[warn] Input cancelled.（Ctrl+C）[/warn]")
                form.clear()
                continue
            except EOFError:
                console.print("\n[info]Exited.（Ctrl+D）[/info]")
                break
            except Exception as e:
                logger.debug("Unexpected error", exc_info=True)
                console.print(Panel.fit(Text(repr(e), no_wrap=False), title="Unexpected error !", border_style="red"))
                continue

    # ========== Internal helpers ==========
    async def _handle_submit(self, action: str) -> bool:
        console.print(f"[info]Add bullet to ->[/info] {self.cfg.credentials().save_location_url or '(default inbox)'}")
        if action == SEND_AND_CLOSE:
            return await self.controller.submit_and_close()
        return await self.controller.submit_and_continue()

    def _close(self):
        self._closing = True
        console.print("[info]Closed.[/info]")

    def _link_callback(self, func):
        def callback():
            run_in_terminal(lambda: func(self.cfg))
        return callback

    def _print_banner(self):
        console.rule("[info]Start[/info]")
        console.print(Panel.fit(
                Text(
                        "Descriptions：\n"
                        " - Next field：Enter\n"
                        f" - Send and Close：{'、'.join(self.kbm.close_labels)}\n"
                        f" - Send and Add Another：{'、'.join(self.kbm.submit_labels)}\n"
                        + "".join(f" - {label}\n" for label in self.kbm.link_labels) +
                        " - Cancel：Ctrl+C\n"
                        " - Exit：Ctrl+D\n\n"
                        "The note field accepts multi-line markdown style text !",
                        no_wrap=False
                ),
                title="Help", border_style="cyan"
        ))
        credentials = self.cfg.credentials()
        console.print(f"[info]Api key：[/info]{mask_secret(credentials.api_key)}")
        console.print(f"[info]Save location：[/info]{credentials.save_location_url or '(not set)'}")
        if not self.cfg.verify_tls:
            console.print("[warn] Disable tls verification !（--insecure）[/warn]")


# ========== CLI with Click ==========

@click.group()
@click.option("--api-key", help="Your Workflowy api key, once given it is saved to ~/.workflowy.inbox.toml")
@click.option("--save-location", help="Url of the bullet new items are added under, saved like --api-key.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Preference file to use.")
@click.option("--base-url", hidden=True, help="Override the Workflowy api host.")
@click.option("--timeout", type=int, default=30, show_default=True, help="Max timeout.")
@click.option("--insecure", is_flag=True, help="Whether disable tls.")
@click.option("--debug", "-d", is_flag=True, help="Start with debug mode.")
@click.pass_context
def cli(ctx, api_key, save_location, config_path, base_url, timeout, insecure, debug):
    """
    workflowy-inbox: Send a bullet to your Workflowy inbox from the terminal!
    """
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    configure_logging(debug)
    # Simulate argparse.Namespace for Config.init_form_args
    class Args:
        pass
    args = Args()
    args.api_key = api_key
    args.save_location = save_location
    args.config_path = config_path
    args.base_url = base_url
    args.timeout = timeout
    args.insecure = insecure
    args.debug = debug
    cfg = Config.init_form_args(args)
    ctx.ensure_object(dict)["cfg"] = cfg


@cli.command("run")
@click.pass_context
def run_cmd(ctx):
    """Open the capture form."""
    cfg = ctx.obj["cfg"]
    app = App(cfg, HttpClient(cfg, transport=ctx.obj.get("transport")))
    app.run()


@cli.command("send")
@click.argument("title")
@click.option("--note", "-n", default="", help="Note / comment under the bullet.")
@click.pass_context
def send_cmd(ctx, title, note):
    """Send a single bullet and exit."""
    try:
        require_title(title)
    except ValidationError as e:
        raise click.BadParameter(e.message, param_hint="TITLE")

    cfg = ctx.obj["cfg"]
    controller = SubmissionController(HttpClient(cfg, transport=ctx.obj.get("transport")), cfg.credentials, notify)
    ok = asyncio.run(controller.submit(SubmissionInput(title=title, note=note)))
    if not ok:
        ctx.exit(1)


@cli.command("config")
@click.pass_context
def config_cmd(ctx):
    """Show the current preferences."""
    cfg = ctx.obj["cfg"]
    credentials = cfg.credentials()
    console.print(f"[info]Preference file：[/info]{cfg.store.path}")
    console.print(f"[info]Api key：[/info]{mask_secret(credentials.api_key)}")
    console.print(f"[info]Save location：[/info]{credentials.save_location_url or '(not set)'}")


@cli.command("open")
@click.argument("target", type=click.Choice(sorted(LINKS)))
@click.pass_context
def open_cmd(ctx, target):
    """Open the api key page, the save location or the preference file."""
    LINKS[target](ctx.obj["cfg"])


def main():
    cli(prog_name="workflowy-inbox")


if __name__ == "__main__":
    main()
