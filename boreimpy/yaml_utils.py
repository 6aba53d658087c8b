# boreimpy/yaml_utils.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
import io

# Characters that sneak into bore tables copied from spreadsheets or PDFs
STRAY_SPACES = {
	"\u00A0": "NO-BREAK SPACE (U+00A0)",
	"\u2002": "EN SPACE (U+2002)",
	"\u2003": "EM SPACE (U+2003)",
	"\u2009": "THIN SPACE (U+2009)",
	"\u202F": "NARROW NO-BREAK SPACE (U+202F)",
	"\u3000": "IDEOGRAPHIC SPACE (U+3000)",
	"\u200B": "ZERO-WIDTH SPACE (U+200B)",
	"\uFEFF": "BOM / ZERO-WIDTH NO-BREAK SPACE (U+FEFF)",
}

TAB = "\t"  # YAML forbids tabs in indentation


@dataclass
class Offense:
	line: int   # 1-based
	col: int    # 1-based
	description: str


def find_yaml_offenses(text: str) -> List[Offense]:
	offenses: List[Offense] = []
	for i, line in enumerate(text.splitlines(), start=1):
		indent = len(line) - len(line.lstrip(" \t"))
		for j, ch in enumerate(line, start=1):
			if ch in STRAY_SPACES:
				offenses.append(Offense(i, j, STRAY_SPACES[ch]))
			elif ch == TAB and j <= indent:
				offenses.append(Offense(i, j, "TAB in indentation"))
	return offenses


def normalize_yaml_text(text: str) -> Tuple[str, int]:
	"""Replace stray spaces by ' ' and indentation tabs by two spaces.
	Returns (text, number_of_offenses_fixed).
	"""
	n = len(find_yaml_offenses(text))
	if text.startswith("\uFEFF"):
		text = text[1:]
	for ch in STRAY_SPACES:
		text = text.replace(ch, " ")
	lines = []
	for line in text.splitlines():
		indent = len(line) - len(line.lstrip(" \t"))
		lines.append(line[:indent].replace(TAB, "  ") + line[indent:])
	return "\n".join(lines), n


def sanitize_yaml_text(text: str, strict: bool = False) -> str:
	"""Normalize YAML text; with strict=True raise ValueError listing the offenses instead."""
	offenses = find_yaml_offenses(text)
	if not offenses:
		return text
	if strict:
		buf = io.StringIO()
		buf.write("Disallowed whitespace found in YAML:\n")
		for off in offenses[:20]:
			buf.write(f"  line {off.line}, col {off.col}: {off.description}\n")
		if len(offenses) > 20:
			buf.write(f"...and {len(offenses) - 20} more.\n")
		raise ValueError(buf.getvalue())
	text, _ = normalize_yaml_text(text)
	return text
