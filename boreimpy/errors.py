from __future__ import annotations
from typing import Optional


class BoreImpError(Exception):
	"""Base class for all errors raised by boreimpy."""


class ReadError(BoreImpError, OSError):
	"""Geometry source is missing, unreadable, unparseable or empty."""

	def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
		where = ""
		if path is not None:
			where = f"{path}"
			if line is not None:
				where += f":{line}"
			where += ": "
		super().__init__(where + message)
		self.path = path
		self.line = line


class InvalidParameter(BoreImpError, ValueError):
	"""Non-finite or out-of-range scalar parameter."""

	def __init__(self, name: str, value, reason: str = "invalid value"):
		super().__init__(f"{name}={value!r}: {reason}")
		self.name = name
		self.value = value


class InvalidGeometry(BoreImpError, ValueError):
	"""Non-positive diameter or radius met during the computation."""

	def __init__(self, message: str, segment: Optional[int] = None):
		if segment is not None:
			message = f"segment {segment}: {message}"
		super().__init__(message)
		self.segment = segment


class NumericDomainError(BoreImpError, ValueError):
	"""Special function evaluated outside its domain (e.g. non-finite argument)."""
