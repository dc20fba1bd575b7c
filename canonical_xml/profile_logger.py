import contextlib
import time
from pathlib import Path
from typing import Generator, List, NamedTuple


class ProfileLog(NamedTuple):
    name: str
    time: float


class ProfileLogger:
    """Wall-clock timings of the canonicalization stages."""

    def __init__(self) -> None:
        self.times: List[ProfileLog] = []

    @contextlib.contextmanager
    def log_time(self, context: str) -> Generator[None, None, None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.times.append(ProfileLog(context, time.perf_counter() - start))

    def total(self, context: str) -> float:
        return sum(log.time for log in self.times if log.name == context)

    def write(self, path: Path) -> None:
        with path.open("w") as log_file:
            log_file.write("Context\tTime (s)\n")
            for log in self.times:
                log_file.write(f"{log.name}\t{log.time:.6f}\n")
