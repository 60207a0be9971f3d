# profiler.py

import functools
import time

# name -> [total_time, count, start_time]
_profile_accumulators = {}

# Off by default. render.main() switches it on from the config.
enabled_profiler = False

class Profiler:
    @staticmethod
    def profile_accumulate_start(name: str):
        if enabled_profiler:
            if name not in _profile_accumulators:
                _profile_accumulators[name] = [0.0, 0, None]
            _profile_accumulators[name][2] = time.perf_counter()  # Reset start time

    @staticmethod
    def profile_accumulate_end(name: str):
        if enabled_profiler:
            if name not in _profile_accumulators or _profile_accumulators[name][2] is None:
                return  # ignore unmatched end
            start = _profile_accumulators[name][2]
            _profile_accumulators[name][0] += time.perf_counter() - start
            _profile_accumulators[name][1] += 1
            _profile_accumulators[name][2] = None

    @staticmethod
    def snapshot() -> dict[str, tuple[float, int]]:
        """(total seconds, call count) per segment recorded so far."""
        return {name: (total, count) for name, (total, count, _) in _profile_accumulators.items()}

    @staticmethod
    def profile_accumulate_report():
        if not enabled_profiler:
            return
        print("\n==== Render timings ====")
        grand_total = sum(total for total, count, _ in _profile_accumulators.values())

        # Segments first, then decorated functions ("f:" prefix)
        sorted_items = sorted(_profile_accumulators.items(), key=lambda x: (x[0].startswith("f:"), x[0]))

        for name, (total, count, _) in sorted_items:
            if count == 0:
                continue
            percent = (total / grand_total) * 100 if grand_total > 0 else 0
            print(f"{percent:5.1f}% - {name}: {total * 1000:.3f}ms over {count} calls (avg {total / count * 1000:.3f}ms)")

        _profile_accumulators.clear()
        print("==== End timings ====")

    @staticmethod
    def timed(name=""):
        def wrapper(fn):
            @functools.wraps(fn)
            def inner(*args, **kwargs):
                if not enabled_profiler:
                    return fn(*args, **kwargs)
                label = "f:" + (name or fn.__name__)
                start = time.perf_counter()
                try:
                    return fn(*args, **kwargs)
                finally:
                    entry = _profile_accumulators.setdefault(label, [0.0, 0, None])
                    entry[0] += time.perf_counter() - start
                    entry[1] += 1
            return inner
        return wrapper
