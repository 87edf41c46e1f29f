INVALID_API_KEY_MESSAGE = "Invalid API Key. Set it in the preferences and try again."
GENERIC_SUBMIT_MESSAGE = (
    "Failed to submit the bullet to Workflowy. "
    "Please check your API key and save location url and then try again."
)


class InboxError(Exception):
    """Base error, `message` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(InboxError):
    def __init__(self, message: str = INVALID_API_KEY_MESSAGE):
        super().__init__(message)


class SubmissionError(InboxError):
    def __init__(self, message: str = GENERIC_SUBMIT_MESSAGE):
        super().__init__(message)


class ValidationError(InboxError):
    pass
