from __future__ import annotations
import sys, threading

FRAMES = "|/-\\"


class _Spinner(threading.Thread):
	def __init__(self, message: str, stream, interval: float):
		super().__init__(daemon=True)
		self.message = message.rstrip()
		self.stream = stream
		self.interval = interval
		self._stop_evt = threading.Event()

	def stop(self):
		self._stop_evt.set()

	def run(self):
		i = 0
		while not self._stop_evt.is_set():
			self.stream.write(f"\r{self.message} {FRAMES[i % len(FRAMES)]}")
			self.stream.flush()
			i += 1
			self._stop_evt.wait(self.interval)
		self.stream.write(f"\r{self.message} done.\n")
		self.stream.flush()


class busy:
	"""Context manager showing a spinner on stderr while a sweep runs.

		with busy("Computing impedance", enabled=not args.quiet):
			res = drv.run()

	Exceptions are never suppressed; with enabled=False nothing is written.
	"""
	def __init__(self, message: str, enabled: bool = True, stream=None, interval: float = 0.15):
		self._msg = message
		self._enabled = enabled
		self._stream = stream if stream is not None else sys.stderr
		self._interval = interval
		self._thr = None

	def __enter__(self):
		if self._enabled:
			self._thr = _Spinner(self._msg, self._stream, self._interval)
			self._thr.start()
		return self

	def __exit__(self, exc_type, exc, tb):
		if self._thr is not None:
			self._thr.stop()
			self._thr.join(timeout=1.0)
			self._thr = None
		return False
