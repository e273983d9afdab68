"""Error taxonomy shared by every store backend and the HTTP layer.

- ValidationError: caller supplied malformed/out-of-range input. Never retried.
- NotFoundError: the referenced question/answer does not exist.
- TransientError: the backing service is unavailable. Safe to retry, but the
  caller decides (no silent auto-retry, to avoid duplicate submissions).
"""


class BoardError(RuntimeError):
    """Base class for store failures. `message` is safe to show to a user."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BoardError):
    status_code = 400


class NotFoundError(BoardError):
    status_code = 404


class TransientError(BoardError):
    status_code = 503
