"""Multi-bar gate phrases.

A smart gate pattern spans several bars and shapes how busy each bar is:

    "build"       Hit count rises linearly from the minimum to the maximum fill.
    "decay"       Hit count falls linearly from the maximum to the minimum fill.
    "build-drop"  Builds over every bar but the last, which drops to the minimum.
    "variation"   Each bar sits in a narrow random band around the middle fill.

Within a bar the hits are shuffled independently, so bars never repeat
verbatim even at equal density.
"""

import typing

import polystep.rng
import polystep.sequence_utils


def _generate_bar (steps: int, hits: int, rng: polystep.rng.Mulberry32) -> typing.List[bool]:

	"""One bar with exactly ``min(hits, steps)`` shuffled hits."""

	bar = [i < hits for i in range(steps)]

	return polystep.sequence_utils.fisher_yates(bar, rng)


def _ramp (start: int, end: int, t: float) -> int:

	return polystep.sequence_utils.round_half_up(start + t * (end - start))


def compute_bar_fills (
	bars: int,
	steps_per_bar: int,
	fill_min: float,
	fill_max: float,
	density: str,
	rng: polystep.rng.Mulberry32
) -> typing.List[int]:

	"""
	Hit count per bar for a density shape.

	A single bar is one uniform draw between the minimum and maximum fill,
	matching the plain gate randomiser.
	"""

	min_hits = polystep.sequence_utils.round_half_up(fill_min * steps_per_bar)
	max_hits = polystep.sequence_utils.round_half_up(fill_max * steps_per_bar)

	if bars == 1:
		return [min_hits + rng.randint_below(max_hits - min_hits + 1)]

	fills: typing.List[int] = []

	if density == "build":
		for bar in range(bars):
			fills.append(_ramp(min_hits, max_hits, bar / (bars - 1)))

	elif density == "decay":
		for bar in range(bars):
			fills.append(_ramp(max_hits, min_hits, bar / (bars - 1)))

	elif density == "build-drop":
		for bar in range(bars - 1):
			t = bar / (bars - 2) if bars > 2 else 1.0
			fills.append(_ramp(min_hits, max_hits, t))
		fills.append(min_hits)

	elif density == "variation":
		mid_hits = polystep.sequence_utils.round_half_up((min_hits + max_hits) / 2)
		variance = max(1, polystep.sequence_utils.round_half_up((max_hits - min_hits) * 0.2))
		for _ in range(bars):
			value = mid_hits + rng.randint_below(variance * 2 + 1) - variance
			fills.append(polystep.sequence_utils.clamp(value, min_hits, max_hits))

	else:
		raise ValueError(f"Unknown smart gate density: {density!r}")

	return fills


def generate_smart_gate_pattern (
	fill_min: float,
	fill_max: float,
	steps_per_bar: int,
	bars: int,
	density: str,
	seed: int
) -> typing.List[bool]:

	"""Generate a ``bars * steps_per_bar`` gate phrase shaped by ``density``.

	Parameters:
		fill_min: Lowest fraction of steps that may be on (0-1).
		fill_max: Highest fraction of steps that may be on (0-1).
		steps_per_bar: Steps per bar, normally 16.
		bars: Number of bars in the phrase.
		density: One of ``"build"``, ``"decay"``, ``"build-drop"``, ``"variation"``.
		seed: PRNG seed; the same seed reproduces the same phrase.

	Example:
		```python
		phrase = generate_smart_gate_pattern(0.25, 0.75, 16, 4, "build", seed=7)
		```
	"""

	rng = polystep.rng.Mulberry32(seed)
	fills = compute_bar_fills(bars, steps_per_bar, fill_min, fill_max, density, rng)

	pattern: typing.List[bool] = []

	for bar in range(bars):
		pattern.extend(_generate_bar(steps_per_bar, fills[bar], rng))

	return pattern
