#!/usr/bin/env python3
import sys
import numpy as np
import matplotlib.pyplot as plt

from pathlib import Path


# --- path setup ---
here = Path(__file__).resolve().parent
repo_root = here.parents[1]   # cone -> validationtests -> repo root
sys.path.insert(0, str(repo_root))


from boreimpy import AcousticConstants, BoreProfile, BoreSegment, input_impedance

N_STAIRS = (4, 16, 64)


def exact_open_cone_Zin(f, L, d_in, d_out, ac):
	"""Truncated cone with an ideal open end (p = 0 at the bell)."""
	r1, r2 = d_in / 2, d_out / 2
	x1 = r1 * L / (r2 - r1)
	k = 2 * np.pi * f / ac.c0
	Zc1 = ac.rhoc0 / (np.pi * r1**2)
	return 1j * Zc1 / (1.0 / np.tan(k * L) + 1.0 / (k * x1))


def staircase(L, d_in, d_out, n):
	"""n cylinders of the local mean diameter approximating the cone."""
	d = np.linspace(d_in, d_out, n + 1)
	return BoreProfile([BoreSegment(i, d[i], d[i + 1], L / n, f"stair {i}") for i in range(n)])


def _find_peaks_simple(y, min_separation=10):
	m = np.abs(y)
	peaks, last = [], -10**9
	for i in range(1, len(m) - 1):
		if m[i] > m[i-1] and m[i] > m[i+1]:
			if (i - last) >= min_separation:
				peaks.append(i); last = i
	return np.array(peaks, dtype=int)


def main():
	L, d_in, d_out = 0.50, 0.010, 0.060
	f = np.linspace(20.0, 2000.0, 991)

	ac_cone = AcousticConstants(rad_calc="none", dump_calc="none", sec_var_calc="on")
	ac_cyl = ac_cone.with_modes(sec_var_calc="off")

	cone = BoreProfile([BoreSegment(0, d_in, d_out, L, "cone")])
	Zin_cone = input_impedance(cone, f, ac_cone)
	Zin_ref = exact_open_cone_Zin(f, L, d_in, d_out, ac_cone)

	err = np.max(np.abs(Zin_cone - Zin_ref) / np.abs(Zin_ref))
	print(f"max relative error, conical segment vs closed form: {err:.3e}")

	idx_ref = _find_peaks_simple(Zin_ref)
	print("\nPeak frequencies [Hz] (first 6):")
	print("  exact       " + "  ".join(f"{f[i]:8.2f}" for i in idx_ref[:6]))
	stairs = {}
	for n in N_STAIRS:
		stairs[n] = input_impedance(staircase(L, d_in, d_out, n), f, ac_cyl)
		idx = _find_peaks_simple(stairs[n])
		print(f"  {n:3d} stairs  " + "  ".join(f"{f[i]:8.2f}" for i in idx[:6]))

	plt.figure(); plt.semilogy(f, np.abs(Zin_cone), label="conical segment |Zin|")
	plt.semilogy(f, np.abs(Zin_ref), "--", label="exact open cone |Zin|")
	for n, Z in stairs.items():
		plt.semilogy(f, np.abs(Z), lw=0.8, label=f"{n} cylinders")
	plt.xlabel("Frequency [Hz]"); plt.ylabel("|Zin| [Pa s/m^3]"); plt.grid(True, which="both", ls=":")
	plt.title("Open cone input impedance"); plt.legend()

	mag_err_db = 20*np.log10(np.maximum(np.abs(Zin_cone),1e-30)/np.maximum(np.abs(Zin_ref),1e-30))
	plt.figure(); plt.plot(f, mag_err_db); plt.axhline(0, ls=":", lw=1)
	plt.xlabel("Frequency [Hz]"); plt.ylabel("Mag error [dB]"); plt.grid(True, ls=":")
	plt.title("Conical segment vs exact |Zin| error")
	plt.show()

if __name__=="__main__": main()
