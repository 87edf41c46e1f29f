from typing import Callable, Dict, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.lexers import PygmentsLexer
from prompt_toolkit.validation import Validator, ValidationError as PromptValidationError
from pygments.lexers.markup import MarkdownLexer

from workflowy_inbox.errors import ValidationError
from workflowy_inbox.utils import require_title

SEND_AND_CLOSE = "close"
SEND_AND_CONTINUE = "continue"

OPEN_API_KEY_PAGE = "api-key"
OPEN_SAVE_LOCATION = "inbox"
OPEN_PREFERENCES = "preferences"

LINK_KEYS = {
    OPEN_API_KEY_PAGE: ("f2", "Get Workflowy Api Key"),
    OPEN_SAVE_LOCATION: ("f3", "Open Workflowy Inbox"),
    OPEN_PREFERENCES: ("f4", "Open Preferences"),
}


class TitleValidator(Validator):
    def validate(self, document):
        try:
            require_title(document.text)
        except ValidationError as e:
            raise PromptValidationError(message=e.message, cursor_position=0)


# ========== Key bindings ==========
class KeyBindingManager:
    """
    Bindings for the note field. Each send action ends the prompt with the
    action name so the caller knows which completion to run.
    """

    def __init__(
            self,
            submit_callback: Callable[[str], None],
            clear_callback: Callable[[], None],
            link_callbacks: Optional[Dict[str, Callable[[], None]]] = None,
    ):
        self.bindings = KeyBindings()
        self.title_bindings = KeyBindings()
        self.submit_labels: List[str] = []
        self.close_labels: List[str] = []
        self.link_labels: List[str] = []
        self._submit = submit_callback
        self._clear = clear_callback
        self._links = link_callbacks or {}
        self._register()

    def _register(self):
        kb = self.bindings

        @kb.add("c-j")
        def _(event):
            self._submit(SEND_AND_CLOSE)
        self.close_labels.append("Ctrl+J")

        @kb.add("escape", "enter")
        def _(event):
            self._submit(SEND_AND_CONTINUE)
        self.submit_labels.append("Esc+Enter")

        # the title field gets cancel and links, but no send keys
        for bindings in (kb, self.title_bindings):
            bindings.add("c-c")(self._make_handler(self._clear))

        for action, (key, label) in LINK_KEYS.items():
            callback = self._links.get(action)
            if callback is None:
                continue
            handler = self._make_handler(callback)
            kb.add(key)(handler)
            self.title_bindings.add(key)(handler)
            self.link_labels.append(f"{key.upper()} {label}")

    @staticmethod
    def _make_handler(callback: Callable[[], None]):
        def handler(event):
            callback()
        return handler


class SessionFactory:
    @staticmethod
    def build_session(bindings: KeyBindings) -> PromptSession:
        return PromptSession(
                multiline=True,
                key_bindings=bindings,
                lexer=PygmentsLexer(MarkdownLexer),
        )

    @staticmethod
    def build_title_session(bindings: KeyBindings) -> PromptSession:
        return PromptSession(
                key_bindings=bindings,
                validator=TitleValidator(),
                validate_while_typing=False,
        )

    @staticmethod
    def make_prompt_fragments(counter: int, field_label: str) -> FormattedText:
        return FormattedText([
            ("class:prompt", f"[{counter}] "),
            ("bold", f"{field_label} "),
            ("", "> "),
        ])
