"""Bore geometry readers.

Three formats share the BoreReader interface; read_bore() picks one by file suffix:

* mensur table (.men, default): one ``df, db, r[, comment]`` row per segment in
  millimetres, ``#`` starts a comment, a ``0, 0, 0`` row ends the table.
* XMENSUR (.xmen): ``name = expr`` variables, then one serial block::

    bell = 120
    MAIN
    11, 11, 100, leadpipe
    11, bell/10, 400
    OPEN_END          # or CLOSED_END
    END_MAIN

* YAML (.yaml / .yml)::

    units: mm          # or m
    segments:
      - {df: 5, db: 10, r: 250, comment: leadpipe}
      - [10, 20, 250, bell]
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List
import logging
import math
import numbers
import re
import yaml
from simpleeval import SimpleEval, InvalidExpression

from .bore import BoreProfile
from .constants import MM
from .errors import BoreImpError, ReadError
from .yaml_utils import sanitize_yaml_text

log = logging.getLogger(__name__)

BRANCH_MARKERS = (">", "<", "|", "@")
UNITS = {"mm": MM, "m": 1.0}

# XMENSUR expressions: the TinyExpr function set (log is base 10, ln natural)
XMEN_FUNCTIONS = {
	"abs": abs, "sqrt": math.sqrt, "exp": math.exp, "pow": math.pow,
	"ln": math.log, "log": math.log10, "log10": math.log10,
	"sin": math.sin, "cos": math.cos, "tan": math.tan,
	"asin": math.asin, "acos": math.acos, "atan": math.atan, "atan2": math.atan2,
	"sinh": math.sinh, "cosh": math.cosh, "tanh": math.tanh,
	"floor": math.floor, "ceil": math.ceil,
}
XMEN_CONSTANTS = {"pi": math.pi, "e": math.e}
XMEN_BRANCHES = ("GROUP", "END_GROUP", "SPLIT", "JOIN", "BRANCH", "MERGE", "TONEHOLE", "INSERT")
_ASSIGN = re.compile(r"^([A-Za-z_]\w*)\s*=\s*(.+)$")


class BoreReader(ABC):
	"""parse(source) turns the text of a geometry file into a BoreProfile."""

	suffixes: tuple = ()

	@abstractmethod
	def parse(self, source: str, path: str | None = None) -> BoreProfile:
		...

	def read(self, path) -> BoreProfile:
		p = Path(path)
		try:
			text = p.read_text(encoding="utf-8")
		except OSError as e:
			raise ReadError(f"cannot read bore file ({e.strerror or e})", path=str(p)) from e
		except UnicodeDecodeError as e:
			raise ReadError(f"not a text file ({e.reason})", path=str(p)) from e
		profile = self.parse(text, path=str(p))
		log.debug("read %s: %d segments", p, len(profile))
		return profile


def _build(rows: list, lines: list, path, closed_end: bool = False) -> BoreProfile:
	"""BoreProfile from mm rows; segment errors are reported at their source line."""
	try:
		return BoreProfile.from_rows(rows, scale=MM, closed_end=closed_end)
	except BoreImpError as e:
		seg = getattr(e, "segment", None)
		line = lines[seg] if seg is not None else None
		raise ReadError(str(e), path=path, line=line) from e


class MensurReader(BoreReader):
	suffixes = (".men",)

	def _row(self, line: str, path, lineno: int):
		if line.startswith(BRANCH_MARKERS):
			raise ReadError(f"branched bores are not supported: {line!r}", path=path, line=lineno)
		sep = "," if "," in line else None
		fields = [x.strip() for x in line.split(sep, 3)]
		if len(fields) < 3:
			raise ReadError(f"expected 'df, db, r[, comment]', got {line!r}", path=path, line=lineno)
		try:
			df, db, r = (float(x) for x in fields[:3])
		except ValueError:
			raise ReadError(f"non-numeric geometry in {line!r}", path=path, line=lineno) from None
		comment = fields[3] if len(fields) > 3 else ""
		return df, db, r, comment

	def parse(self, source: str, path: str | None = None) -> BoreProfile:
		rows = []
		lines = []
		for lineno, raw in enumerate(source.splitlines(), start=1):
			line = raw.split("#", 1)[0].strip()
			if not line:
				continue
			row = self._row(line, path, lineno)
			if row[:3] == (0.0, 0.0, 0.0):
				break
			rows.append(row)
			lines.append(lineno)
		if not rows:
			raise ReadError("no segments found", path=path)
		return _build(rows, lines, path)


class XmensurReader(BoreReader):
	"""Serial XMENSUR (.xmen): ``name = expr`` variables and one MAIN block.

	Cells may be expressions over the variables defined so far (TinyExpr
	syntax, ``^`` is a power). MAIN ends with OPEN_END (radiating bell) or
	CLOSED_END (rigid termination). GROUP and branch constructs are rejected.
	"""
	suffixes = (".xmen",)

	@staticmethod
	def _evaluator() -> SimpleEval:
		return SimpleEval(functions=dict(XMEN_FUNCTIONS), names=dict(XMEN_CONSTANTS))

	@staticmethod
	def _value(ev: SimpleEval, expr: str, path, lineno: int) -> float:
		expr = expr.strip()
		try:
			v = ev.eval(expr.replace("^", "**"))
		except (InvalidExpression, SyntaxError, ArithmeticError, TypeError, ValueError) as e:
			raise ReadError(f"cannot evaluate {expr!r} ({e})", path=path, line=lineno) from None
		if isinstance(v, bool) or not isinstance(v, numbers.Real) or not math.isfinite(v):
			raise ReadError(f"{expr!r} is not a finite number", path=path, line=lineno)
		return float(v)

	def _row(self, ev: SimpleEval, line: str, path, lineno: int):
		cells = [x.strip() for x in line.split(",", 3)]
		if len(cells) < 3:
			raise ReadError(f"expected 'df, db, r[, comment]', got {line!r}", path=path, line=lineno)
		df, db, r = (self._value(ev, x, path, lineno) for x in cells[:3])
		return df, db, r, (cells[3] if len(cells) > 3 else "")

	def parse(self, source: str, path: str | None = None) -> BoreProfile:
		ev = self._evaluator()
		rows, lines = [], []
		state = "top"   # top -> main -> ended -> done
		closed = False
		for lineno, raw in enumerate(source.splitlines(), start=1):
			line = raw.split("#", 1)[0].strip()
			if not line:
				continue
			m = _ASSIGN.match(line)
			if m:
				ev.names[m.group(1)] = self._value(ev, m.group(2), path, lineno)
				continue
			key = line.split(",", 1)[0].strip().upper()
			if key in XMEN_BRANCHES or line.startswith(BRANCH_MARKERS):
				raise ReadError(f"branched bores are not supported: {line!r}", path=path, line=lineno)
			if key == "MAIN":
				if state != "top":
					raise ReadError("only one MAIN block is allowed", path=path, line=lineno)
				state = "main"
			elif key in ("OPEN_END", "CLOSED_END"):
				if state != "main":
					raise ReadError(f"{key} outside a MAIN block", path=path, line=lineno)
				closed = key == "CLOSED_END"
				state = "ended"
			elif key == "END_MAIN":
				if state not in ("main", "ended"):
					raise ReadError("END_MAIN without MAIN", path=path, line=lineno)
				state = "done"
			elif state == "main":
				rows.append(self._row(ev, line, path, lineno))
				lines.append(lineno)
			elif state == "ended":
				raise ReadError(f"segment after the end of MAIN: {line!r}", path=path, line=lineno)
			else:
				raise ReadError(f"segment outside the MAIN block: {line!r}", path=path, line=lineno)
		if state in ("main", "ended"):
			raise ReadError("MAIN block is not closed with END_MAIN", path=path)
		if not rows:
			raise ReadError("no segments found", path=path)
		return _build(rows, lines, path, closed_end=closed)


class YamlBoreReader(BoreReader):
	suffixes = (".yaml", ".yml")

	def __init__(self, strict: bool = False):
		self.strict = strict

	@staticmethod
	def _row(item: Any, i: int) -> tuple:
		if isinstance(item, dict):
			try:
				return (item["df"], item["db"], item["r"], item.get("comment") or "")
			except KeyError as e:
				raise ReadError(f"segment {i} is missing {e.args[0]!r}") from None
		if isinstance(item, (list, tuple)) and len(item) >= 3:
			return tuple(item[:3]) + ((item[3] if len(item) > 3 else ""),)
		raise ReadError(f"segment {i}: expected mapping or [df, db, r, comment], got {item!r}")

	def parse(self, source: str, path: str | None = None) -> BoreProfile:
		try:
			text = sanitize_yaml_text(source, strict=self.strict)
			cfg: Dict[str, Any] = yaml.safe_load(text)
		except (ValueError, yaml.YAMLError) as e:
			raise ReadError(f"invalid YAML: {e}", path=path) from e
		if not isinstance(cfg, dict):
			raise ReadError("YAML bore file must be a mapping with a 'segments' list", path=path)
		units = str(cfg.get("units", "mm")).strip().lower()
		if units not in UNITS:
			raise ReadError(f"unknown units {units!r}, must be one of: {', '.join(UNITS)}", path=path)
		segs = cfg.get("segments")
		if not isinstance(segs, list) or not segs:
			raise ReadError("YAML bore file must define a non-empty 'segments' list", path=path)
		try:
			rows: List[tuple] = [self._row(item, i) for i, item in enumerate(segs)]
			return BoreProfile.from_rows(rows, scale=UNITS[units])
		except ReadError as e:
			if e.path is None and path is not None:
				raise ReadError(str(e), path=path) from e
			raise
		except (BoreImpError, TypeError, ValueError) as e:
			raise ReadError(str(e), path=path) from e


READERS: List[BoreReader] = [MensurReader(), XmensurReader(), YamlBoreReader()]


def reader_for(path) -> BoreReader:
	suffix = Path(path).suffix.lower()
	for rd in READERS:
		if suffix in rd.suffixes:
			return rd
	return READERS[0]


def read_bore(path) -> BoreProfile:
	"""Read a bore file, choosing the format from its suffix (mensur table by default)."""
	if path is None or str(path) == "":
		raise ReadError("no bore file given")
	return reader_for(path).read(path)
