from __future__ import annotations

import contextlib
import cProfile
import time
from typing import Generator


class Perf:
    def __init__(self) -> None:
        self._prof: cProfile.Profile | None = None
        self.records: list[tuple[str, float]] = []

    @contextlib.contextmanager
    def event(self, name: str) -> Generator[None, None, None]:
        if self._prof is None:
            yield
            return

        start = time.monotonic()
        self._prof.enable()
        try:
            yield
        finally:
            self._prof.disable()
            self.records.append((name, time.monotonic() - start))

    def init_profiling(self) -> None:
        self._prof = cProfile.Profile()

    def save_profiles(self, filename: str) -> None:
        assert self._prof is not None
        self._prof.dump_stats(f'{filename}.pstats')
        with open(filename, 'w', encoding='UTF-8') as f:
            f.write('μs\tevent\n')
            for name, duration in self.records:
                f.write(f'{int(duration * 1000 * 1000)}\t{name}\n')


@contextlib.contextmanager
def perf_log(filename: str | None) -> Generator[Perf, None, None]:
    perf = Perf()
    if filename is None:
        yield perf
    else:
        perf.init_profiling()
        try:
            yield perf
        finally:
            perf.save_profiles(filename)
