"""Exception types shared by the orchestrator, the loader and the HTTP layer.

Every per-request error derives from :class:`InstaMongoError` and carries the
status code and the short message the client sees. The full diagnostic detail
stays in the logs (and in ``__cause__``), never in the response body.
"""

from __future__ import annotations


class InstaMongoError(Exception):
	status_code: int = 400

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


class MissingParameterError(InstaMongoError):
	"""A required query parameter was absent or empty."""

	def __init__(self, param: str, message: str) -> None:
		super().__init__(message)
		self.param = param


class FixtureOperationError(InstaMongoError):
	"""A collaborator failed while serving an operation."""


class FixtureNotFoundError(InstaMongoError):
	def __init__(self, fixture: str, path: str) -> None:
		super().__init__(f"Fixture {fixture} not found at {path}")
		self.fixture = fixture
		self.path = path


class FixtureFormatError(InstaMongoError):
	def __init__(self, path: str, reason: str) -> None:
		super().__init__(f"Malformed fixture file {path}: {reason}")
		self.path = path
		self.reason = reason


class ConfigurationError(InstaMongoError):
	pass


class StoreStartupError(InstaMongoError):
	pass
