from __future__ import annotations
from enum import Enum
import numbers

from .errors import InvalidParameter


class _Mode(str, Enum):
	"""Closed set of mode selectors.

	parse() accepts the member itself, its name or value (any case) and the
	integer / boolean flags used by calcimp.
	"""

	@classmethod
	def _aliases(cls) -> dict:
		return {}

	@classmethod
	def _flags(cls) -> tuple:
		return tuple(cls)

	@classmethod
	def parse(cls, value):
		if isinstance(value, cls):
			return value
		if isinstance(value, numbers.Integral):
			flags = cls._flags()
			if 0 <= int(value) < len(flags):
				return flags[int(value)]
			raise InvalidParameter(cls.__name__, value, f"flag must be in 0..{len(flags) - 1}")
		if isinstance(value, str):
			key = value.strip().lower()
			key = cls._aliases().get(key, key)
			for m in cls:
				if key == m.value or key == m.name.lower():
					return m
		choices = ", ".join(m.value for m in cls)
		raise InvalidParameter(cls.__name__, value, f"must be one of: {choices}")


class RadiationMode(_Mode):
	NONE   = "none"
	PIPE   = "pipe"
	BAFFLE = "baffle"

	@classmethod
	def _aliases(cls) -> dict:
		# calcimp spells it BUFFLE
		return {"buffle": "baffle", "flanged": "baffle", "unflanged": "pipe"}


class DampingMode(_Mode):
	NONE = "none"
	WALL = "wall"


class SectionVariation(_Mode):
	OFF = "off"
	ON  = "on"
