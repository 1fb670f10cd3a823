"""Spinner shown while waiting on the release API.

The animation only runs on a terminal. The outcome line printed by
stop() is shown everywhere, so piped output still records what happened.
"""

import itertools
import sys
import threading

from cursor_manager.display.colors import Colors, Icons


class Spinner:
    """Braille spinner that ends with a ✓ or ✖ status line.

    Usage:
        spinner = Spinner("Fetching latest version information").start()
        try:
            release = fetch_latest(url)
        except NetworkError:
            spinner.stop("Failed to fetch version information", ok=False)
            raise
        spinner.stop(f"Latest version available: {release.version}")
    """

    FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

    def __init__(self, message: str, stream=None):
        self.message = message
        self.stream = stream if stream is not None else sys.stdout
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._frames = itertools.cycle(self.FRAMES)

    @property
    def animated(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def _spin(self) -> None:
        while not self._stop_event.is_set():
            self.stream.write(f"\r{Colors.CYAN}{next(self._frames)}{Colors.RESET} {self.message}...")
            self.stream.flush()
            self._stop_event.wait(0.08)

    def start(self) -> "Spinner":
        if self.animated:
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def stop(self, final: str | None = None, ok: bool = True) -> None:
        """Stop the animation and optionally print an outcome line.

        Args:
            final: Status text to print in place of the spinner.
            ok: Print final with ✓ in green when True, ✖ in red otherwise.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=0.2)
            self._thread = None
        if self.animated:
            self.stream.write(f"\r{' ' * (len(self.message) + 10)}\r")
        if final:
            color, icon = (Colors.GREEN, Icons.CHECK) if ok else (Colors.RED, Icons.CROSS)
            self.stream.write(f"{color}{icon} {final}{Colors.RESET}\n")
        self.stream.flush()

    def __enter__(self) -> "Spinner":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.stop()
        else:
            self.stop(f"{self.message} failed", ok=False)


__all__ = ["Spinner"]
