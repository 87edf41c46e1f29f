import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from workflowy_inbox.errors import InboxError, GENERIC_SUBMIT_MESSAGE
from workflowy_inbox.utils import BulletPayload, Credentials, SubmissionInput

logger = logging.getLogger(__name__)

CLOSE_DELAY_SECONDS = 1.0


class SubmissionState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class NotificationKind(Enum):
    ANIMATED = "animated"
    SUCCESS = "success"
    FAILURE = "failure"


Notify = Callable[[NotificationKind, str, Optional[str]], None]


@dataclass
class FormState:
    title: str = ""
    note: str = ""

    def set(self, title: Optional[str] = None, note: Optional[str] = None):
        if title is not None:
            self.title = title
        if note is not None:
            self.note = note

    def get(self) -> SubmissionInput:
        return SubmissionInput(title=self.title, note=self.note)

    def clear(self):
        self.title = ""
        self.note = ""


# ========== Submit pipeline ==========
class SubmissionController:
    """
    Runs one bullet submission at a time: validate the key, create the bullet,
    report the outcome through `notify`. A submit while another is in flight is ignored.

    `client` needs async `validate_credentials(credentials)` and
    `create_bullet(payload, credentials)`; `credentials` is called once per submit.
    """

    def __init__(
            self,
            client,
            credentials: Callable[[], Credentials],
            notify: Notify,
            close: Optional[Callable[[], None]] = None,
            close_delay: float = CLOSE_DELAY_SECONDS,
            sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.form = FormState()
        self._credentials = credentials
        self._notify = notify
        self._close = close
        self._close_delay = close_delay
        self._sleep = sleep
        self._state = SubmissionState.IDLE
        self._state_lock = threading.Lock()

    @property
    def state(self) -> SubmissionState:
        return self._state

    def _try_begin(self) -> bool:
        with self._state_lock:
            if self._state is SubmissionState.IN_FLIGHT:
                return False
            self._state = SubmissionState.IN_FLIGHT
            return True

    def _finish(self):
        with self._state_lock:
            self._state = SubmissionState.IDLE

    async def submit(self, submission: Optional[SubmissionInput] = None) -> bool:
        """Returns True only when the bullet was created."""
        if not self._try_begin():
            logger.debug("Submit ignored, a submission is already in flight")
            return False

        submission = submission or self.form.get()
        failure: Optional[str] = None
        try:
            self._notify(NotificationKind.ANIMATED, "Sending to Workflowy...", None)
            credentials = self._credentials()
            await self.client.validate_credentials(credentials)
            payload = BulletPayload.build(submission, credentials)
            await self.client.create_bullet(payload, credentials)
        except InboxError as e:
            failure = e.message
        except Exception:
            logger.exception("Unexpected error while submitting")
            failure = GENERIC_SUBMIT_MESSAGE
        finally:
            # cancellation included, the form must never stay locked
            self._finish()

        if failure is not None:
            self._notify(NotificationKind.FAILURE, "Error", failure)
            return False

        logger.info("Created bullet %s", payload.id)
        self._notify(NotificationKind.SUCCESS, "Success!", "Added the bullet to your Workflowy inbox.")
        self.form.clear()
        return True

    async def submit_and_close(self) -> bool:
        ok = await self.submit()
        if ok:
            # keep the success notification on screen for a moment
            await self._sleep(self._close_delay)
            if self._close is not None:
                self._close()
        return ok

    async def submit_and_continue(self) -> bool:
        return await self.submit()
