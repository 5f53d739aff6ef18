from __future__ import annotations


class BoardhubError(Exception):
  status_code = 400

  def __init__(self, message: str) -> None:
    super().__init__(message)
    self.message = message


class NotFound(BoardhubError):
  """Missing entity, or one the caller may not read."""

  status_code = 404


class Forbidden(BoardhubError):
  status_code = 403


class InvalidState(BoardhubError):
  status_code = 400


class ValidationError(BoardhubError):
  status_code = 422
