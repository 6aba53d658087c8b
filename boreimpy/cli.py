from __future__ import annotations
import argparse, os
import datetime, pytz, csv
import logging
from pathlib import Path

import pandas as pd

from .air import AcousticConstants
from .busy import busy
from .constants import PROGRAMNAME, DEFAULT_MAX_FREQ, DEFAULT_STEP_FREQ, DEFAULT_TEMPERATURE
from .domains import RadiationMode, DampingMode, SectionVariation
from .errors import BoreImpError
from .readers import read_bore
from .response import ImpedanceSweepDriver, SweepResult

log = logging.getLogger(__name__)


def _get_version() -> str:
	try:
		from importlib.metadata import version
		return version("boreimpy")
	except Exception:
		return "unknown"


def _header_lines() -> list[str]:
	timestamp = datetime.datetime.now(pytz.utc).isoformat()
	return [
		f"# Program: {PROGRAMNAME}",
		f"# Version: {_get_version()}",
		f"# Generated: {timestamp}",
	]


def _write_table(df: pd.DataFrame, outpath: str, extra_header: list[str] | None = None):
	with open(outpath, "w", encoding="utf-8") as f:
		for line in _header_lines() + (extra_header or []):
			f.write(line + "\n")
	df.to_csv(outpath, mode="a", index=False, quoting=csv.QUOTE_MINIMAL)


def write_impedance_csv(res: SweepResult, outdir: str, pre: str, ac: AcousticConstants, source: str) -> str:
	"""write freq, real, imag, mag rows to <pre>IMPEDANCE.csv
	"""
	outpath = os.path.join(outdir, f"{pre}IMPEDANCE.csv")
	settings = [
		f"# Bore: {source}",
		f"# Temperature: {ac.temperature} degC",
		f"# Radiation: {ac.rad_calc.name}, damping: {ac.dump_calc.name}, section variation: {ac.sec_var_calc.name}",
	]
	_write_table(res.to_frame(), outpath, settings)
	return outpath


def write_bore_csv(frame: pd.DataFrame, outdir: str, pre: str, source: str) -> str:
	outpath = os.path.join(outdir, f"{pre}BORE.csv")
	_write_table(frame, outpath, [f"# Bore: {source}", "# Units: mm"])
	return outpath


def _positive_float(text: str) -> float:
	try:
		v = float(text)
	except ValueError:
		raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
	if not (v > 0.0) or v == float("inf"):
		raise argparse.ArgumentTypeError(f"must be finite and > 0, got {text}")
	return v


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog='boreimpy', description=f"{PROGRAMNAME}: Input impedance of wind-instrument bores from a chain of conical and cylindrical segments")
	parser.add_argument("bore", help="Bore geometry file (.men mensur table, .xmen XMENSUR, or .yaml/.yml)")
	parser.add_argument("--max-freq", type=_positive_float, default=DEFAULT_MAX_FREQ, help="Maximum frequency in Hz (default: %(default)s)")
	parser.add_argument("--step-freq", type=_positive_float, default=DEFAULT_STEP_FREQ, help="Frequency step in Hz (default: %(default)s)")
	parser.add_argument("--temperature", type=float, default=DEFAULT_TEMPERATURE, help="Air temperature in degC (default: %(default)s)")
	parser.add_argument("--radiation", choices=[m.value for m in RadiationMode], default=RadiationMode.PIPE.value,
		help="Radiation impedance at the open end (default: %(default)s)")
	parser.add_argument("--damping", choices=[m.value for m in DampingMode], default=DampingMode.WALL.value,
		help="Wall losses (default: %(default)s)")
	parser.add_argument("--section-variation", action="store_true", help="Treat tapered segments as conical frusta instead of mean-diameter cylinders")
	parser.add_argument("--outdir", default=str(Path.cwd()), help="Output directory")
	parser.add_argument("--prefix", default="", help="Filename prefix")
	parser.add_argument("--png", action="store_true", help="Write PNG plots")
	parser.add_argument("--pdf", action="store_true", help="Write PDF plots")
	parser.add_argument("--csv", action="store_true", help="Write impedance data to CSV file")
	parser.add_argument("--print-men", action="store_true", help="Print the bore geometry (mm) and exit")
	parser.add_argument("--quiet", action="store_true", help="No progress spinner")
	parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
	return parser


def main(argv=None):
	parser = build_parser()
	args = parser.parse_args(argv)
	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s")

	try:
		profile = read_bore(args.bore)
	except BoreImpError as e:
		parser.error(str(e))

	os.makedirs(args.outdir, exist_ok=True)
	pre = (args.prefix + "_") if args.prefix else ""

	if args.print_men:
		frame = profile.to_frame()
		print(frame.to_string(index=False))
		if args.csv:
			print(f"Wrote: {write_bore_csv(frame, args.outdir, pre, args.bore)}")
		return 0

	if not (args.png or args.pdf or args.csv):
		parser.error("You must specify at least one output format: --png, --pdf, --csv")

	try:
		ac = AcousticConstants(
			temperature=args.temperature,
			rad_calc=args.radiation,
			dump_calc=args.damping,
			sec_var_calc=SectionVariation.ON if args.section_variation else SectionVariation.OFF,
		)
		sweep = ImpedanceSweepDriver(profile, args.max_freq, args.step_freq, ac)
		with busy(f"Computing {len(sweep)} points", enabled=not args.quiet):
			res = sweep.run()
	except BoreImpError as e:
		parser.error(str(e))

	outputs = []
	# PLOTS
	for fmt, enabled in (("png", args.png), ("pdf", args.pdf)):
		if enabled:
			from .plotting import plot_impedance, plot_bore
			geo = profile.to_frame()
			plot_impedance(res.freq, res.mag, outfile=os.path.join(args.outdir, f"{pre}IMPEDANCE.{fmt}"),
					title=f"Input impedance: {Path(args.bore).name}")
			plot_bore(geo["df"].to_numpy(), geo["db"].to_numpy(), geo["r"].to_numpy(),
					outfile=os.path.join(args.outdir, f"{pre}BORE.{fmt}"))
			outputs.append(fmt.upper())
	# CSV output
	if args.csv:
		write_impedance_csv(res, args.outdir, pre, ac, args.bore)
		outputs.append("CSV")
	log.debug("peak magnitude %.2f dB", float(res.mag[1:].max()) if len(res) > 1 else float("nan"))
	print(f'Wrote: {", ".join(outputs)} to {args.outdir}/')
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
