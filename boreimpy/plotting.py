from __future__ import annotations
import numpy as np
import matplotlib.pyplot as plt

from .constants import PROGRAMNAME


def __branding(ax):
	ax.text(
		0.99, 0.01, PROGRAMNAME,
		transform=ax.transAxes,
		ha="right", va="bottom",
		color="gray",
		bbox=dict(facecolor="white", edgecolor="none", pad=2.0),
		zorder=10
	)


def plot_impedance(f: np.ndarray, mag_db: np.ndarray, outfile: str | None = None, title: str = "Input impedance"):
	"""Impedance magnitude [dB] over a linear frequency axis (row 0, the DC point, is skipped)."""
	fig = plt.figure()
	ax = fig.add_subplot(111)
	ax.plot(f[1:], mag_db[1:])
	ax.set_xlabel("Frequency (Hz)")
	ax.set_ylabel("Magnitude (dB)")
	ax.set_xlim(0, f[-1] if len(f) > 1 else None)
	ax.grid(True, which="both", ls=":")
	ax.set_title(title)
	__branding(ax)
	if outfile:
		fig.savefig(outfile, bbox_inches="tight", dpi=150)
	return fig


def plot_bore(df_mm: np.ndarray, db_mm: np.ndarray, r_mm: np.ndarray, outfile: str | None = None, title: str = "Bore profile"):
	"""Radius along the axis, mirrored about it, using r as the segment length."""
	x = np.concatenate(([0.0], np.cumsum(r_mm)))
	xs = np.repeat(x, 2)[1:-1]
	rs = np.ravel(np.column_stack((df_mm, db_mm))) / 2.0
	fig = plt.figure()
	ax = fig.add_subplot(111)
	ax.plot(xs, rs, color="C0")
	ax.plot(xs, -rs, color="C0")
	ax.set_xlabel("Position (mm)")
	ax.set_ylabel("Radius (mm)")
	ax.set_aspect("auto")
	ax.grid(True, ls=":")
	ax.set_title(title)
	__branding(ax)
	if outfile:
		fig.savefig(outfile, bbox_inches="tight", dpi=150)
	return fig
