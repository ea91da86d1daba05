import math
import typing

import polystep.constants
import polystep.rng
import polystep.sequence_utils


def lfo_value (waveform: str, phase: float, seed: int = 0) -> float:

	"""
	Sample a unipolar waveform (0..1) at a phase in [0, 1).

	``"slew-random"`` interpolates linearly between nine seeded anchor points
	spread evenly over the cycle; other unknown names fall back to sine.
	"""

	if waveform == "triangle":
		# 0 -> 1 over the first half, 1 -> 0 over the second
		if phase < 0.5:
			return phase * 2
		return 2 - phase * 2

	if waveform == "saw":
		return phase

	if waveform == "slew-random":
		rng = polystep.rng.Mulberry32(seed)
		anchor_count = polystep.constants.SLEW_ANCHORS
		anchors = [rng.next() for _ in range(anchor_count + 1)]

		position = phase * anchor_count
		index = int(math.floor(position))
		fraction = position - index

		a = anchors[min(index, anchor_count)]
		b = anchors[min(index + 1, anchor_count)]

		return a + (b - a) * fraction

	return 0.5 + 0.5 * math.sin(phase * 2 * math.pi)


def generate_lfo_pattern (waveform: str, rate: int, depth: float, offset: float, length: int, seed: int = 0) -> typing.List[float]:

	"""Render an LFO into a MOD lane.

	Step ``i`` samples the waveform at phase ``(i % rate) / rate``, so ``rate``
	is the cycle length in steps. The raw value is scaled around ``offset`` by
	``depth``, quantised to 0.01 and clamped to [0, 1].

	Parameters:
		waveform: ``"sine"``, ``"triangle"``, ``"saw"`` or ``"slew-random"``.
		rate: Steps per cycle (1-64).
		depth: Amplitude, 0-1.
		offset: Centre value, 0-1.
		length: Number of steps to generate.
		seed: Anchor seed for ``"slew-random"``.
	"""

	rate = max(polystep.constants.MIN_LFO_RATE, rate)
	pattern = []

	for i in range(length):
		phase = (i % rate) / rate
		raw = lfo_value(waveform, phase, seed)
		scaled = offset + (raw - 0.5) * depth
		pattern.append(polystep.sequence_utils.clamp(polystep.sequence_utils.quantize(scaled, 0.01), 0.0, 1.0))

	return pattern
