import os
import uuid
from typing import Optional
from dataclasses import dataclass, field

from workflowy_inbox.errors import ValidationError
from workflowy_inbox.preference_store import PreferenceStore

DEFAULT_BASE_URL = "https://beta.workflowy.com"
API_KEY_PAGE_URL = "https://workflowy.com/api-key/"

ENV_API_KEY = "WORKFLOWY_API_KEY"
ENV_SAVE_LOCATION = "WORKFLOWY_SAVE_LOCATION_URL"


# ========== Config & Models ==========
@dataclass
class Credentials:
    api_key: str = ""
    save_location_url: str = ""


@dataclass
class Config:
    api_key: str = ""
    save_location_url: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 30
    verify_tls: bool = True
    debug: bool = False
    store: Optional[PreferenceStore] = None

    def credentials(self) -> Credentials:
        # re-read on every call so edits made via "open preferences" apply to the next submit
        prefs = self.store.load() if self.store is not None else {}
        return Credentials(
                api_key=self.api_key or prefs.get("api_key", ""),
                save_location_url=self.save_location_url or prefs.get("save_location_url", ""),
        )

    @classmethod
    def init_form_args(cls, args) -> "Config":
        """
        Build the runtime config. Precedence: command line, environment, preference file.
        Values passed on the command line are written back to the preference file.
        """
        store = PreferenceStore(getattr(args, "config_path", None))

        updates = {}
        if args.api_key:
            updates["api_key"] = args.api_key
        if args.save_location:
            updates["save_location_url"] = args.save_location
        if updates:
            store.save(**updates)

        # the file itself is read lazily by credentials()
        return cls(
                api_key=args.api_key or os.environ.get(ENV_API_KEY, ""),
                save_location_url=args.save_location or os.environ.get(ENV_SAVE_LOCATION, ""),
                base_url=(getattr(args, "base_url", None) or DEFAULT_BASE_URL).rstrip("/"),
                timeout=args.timeout,
                verify_tls=not args.insecure,
                debug=bool(args.debug),
                store=store,
        )


@dataclass
class SubmissionInput:
    title: str
    note: str = ""


@dataclass
class BulletPayload:
    title: str
    note: str
    save_location_url: str
    # a new id per attempt, resubmits never reuse one
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def build(cls, submission: SubmissionInput, credentials: Credentials) -> "BulletPayload":
        return cls(
                title=submission.title,
                note=submission.note or "",
                save_location_url=credentials.save_location_url,
        )

    def to_json(self) -> dict:
        return {
            "new_bullet_id": self.id,
            "new_bullet_title": self.title,
            "new_bullet_note": self.note,
            "save_location_url": self.save_location_url,
        }


@dataclass
class SubmitResult:
    ok: bool
    status_code: Optional[int]
    text: str
    error: Optional[str] = None


def require_title(text: Optional[str]) -> str:
    if text is None or not text.strip():
        raise ValidationError("Bullet text is required.")
    return text
