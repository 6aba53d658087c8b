from __future__ import annotations
from dataclasses import dataclass, replace
from collections.abc import Sequence
from typing import Iterable, Iterator
import math
import pandas as pd

from .constants import MM
from .errors import ReadError, InvalidGeometry


@dataclass(frozen=True)
class BoreSegment:
	"""One duct segment of a bore.

	df, db: diameters at the mouthpiece side and bell side [m]
	r:      shape parameter [m]; the cascade uses it as the axial length
	"""
	index: int
	df: float
	db: float
	r: float
	comment: str = ""

	def __post_init__(self):
		for name in ("df", "db", "r"):
			v = float(getattr(self, name))
			if not math.isfinite(v):
				raise InvalidGeometry(f"{name}={v!r} is not finite", segment=self.index)
			object.__setattr__(self, name, v)
		if self.r < 0.0:
			raise InvalidGeometry(f"negative shape parameter r={self.r}", segment=self.index)
		object.__setattr__(self, "comment", "" if self.comment is None else str(self.comment))

	@property
	def length(self) -> float:
		return self.r

	@property
	def mean_diameter(self) -> float:
		return 0.5 * (self.df + self.db)

	@property
	def is_cylinder(self) -> bool:
		return self.df == self.db


class BoreProfile(Sequence):
	"""Immutable, mouthpiece-first sequence of BoreSegment.

	Segments are renumbered by position, so index always equals the place in
	the chain. closed_end marks a rigid termination at the bell (no radiation).
	"""

	__slots__ = ("_segments", "_closed_end")

	def __init__(self, segments: Iterable[BoreSegment], closed_end: bool = False):
		segs = tuple(s if s.index == i else replace(s, index=i) for i, s in enumerate(segments))
		if not segs:
			raise ReadError("bore profile contains no segments")
		object.__setattr__(self, "_segments", segs)
		object.__setattr__(self, "_closed_end", bool(closed_end))

	def __setattr__(self, name, value):
		raise AttributeError("BoreProfile is immutable")

	@classmethod
	def from_rows(cls, rows: Iterable[Sequence], scale: float = 1.0, closed_end: bool = False) -> "BoreProfile":
		"""Build from (df, db, r[, comment]) rows; scale converts to metres (MM for mm)."""
		segs = []
		for i, row in enumerate(rows):
			if len(row) < 3:
				raise ReadError(f"row {i} needs df, db, r; got {row!r}")
			comment = row[3] if len(row) > 3 else ""
			segs.append(BoreSegment(
				index=i,
				df=float(row[0]) * scale,
				db=float(row[1]) * scale,
				r=float(row[2]) * scale,
				comment=comment,
			))
		return cls(segs, closed_end=closed_end)

	def __len__(self) -> int:
		return len(self._segments)

	def __getitem__(self, i):
		return self._segments[i]

	def __iter__(self) -> Iterator[BoreSegment]:
		return iter(self._segments)

	def __reversed__(self) -> Iterator[BoreSegment]:
		return reversed(self._segments)

	def __eq__(self, other):
		if not isinstance(other, BoreProfile):
			return NotImplemented
		return self._segments == other._segments and self._closed_end == other._closed_end

	def __hash__(self):
		return hash((self._segments, self._closed_end))

	def __repr__(self):
		end = ", closed" if self._closed_end else ""
		return f"BoreProfile({len(self)} segments, length={self.total_length:.4g} m{end})"

	@property
	def closed_end(self) -> bool:
		return self._closed_end

	def first(self) -> BoreSegment:
		return self._segments[0]

	def last(self) -> BoreSegment:
		return self._segments[-1]

	@property
	def total_length(self) -> float:
		return sum(s.r for s in self._segments)

	@property
	def mouthpiece_area(self) -> float:
		return math.pi * self.first().df ** 2 / 4.0

	def validate(self, allow_capped_end: bool = True) -> None:
		"""Raise InvalidGeometry for non-positive diameters.

		A zero end diameter is accepted on the last segment only (capped bore).
		"""
		last = len(self) - 1
		for i, seg in enumerate(self._segments):
			if not (seg.df > 0.0):
				raise InvalidGeometry(f"start diameter df={seg.df} must be > 0", segment=i)
			capped = allow_capped_end and i == last and seg.db == 0.0
			if not (seg.db > 0.0 or capped):
				raise InvalidGeometry(f"end diameter db={seg.db} must be > 0", segment=i)

	def projection(self) -> list[tuple[float, float, float, str]]:
		"""Per-segment (df, db, r, comment), lengths in millimetres."""
		return [(s.df / MM, s.db / MM, s.r / MM, s.comment) for s in self._segments]

	def to_frame(self) -> pd.DataFrame:
		return pd.DataFrame(self.projection(), columns=["df", "db", "r", "comment"])
