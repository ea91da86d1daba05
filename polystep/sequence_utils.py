import math
import typing

import polystep.rng

T = typing.TypeVar("T")


def euclidean (hits: int, length: int) -> typing.List[bool]:

	"""
	Generate a Euclidean rhythm using Bjorklund's algorithm.

	``hits`` onsets are spread as evenly as possible over ``length`` steps.
	Hit groups are paired with trailing rest groups until at most one
	remainder group is left, then the groups are concatenated.

	Example:
		```python
		euclidean(3, 8)  # tresillo: [T, F, F, T, F, F, T, F]
		```
	"""

	if length <= 0:
		return []

	if hits <= 0:
		return [False] * length

	if hits >= length:
		return [True] * length

	groups: typing.List[typing.List[bool]] = [[True] for _ in range(hits)] + [[False] for _ in range(length - hits)]
	full = hits

	while True:

		remainder = len(groups) - full

		if remainder <= 1:
			break

		merge_count = min(full, remainder)

		merged = [groups[i] + groups[len(groups) - 1 - i] for i in range(merge_count)]
		unmerged = groups[merge_count:len(groups) - merge_count]

		groups = merged + unmerged
		full = merge_count

	return [value for group in groups for value in group]


def rotate (sequence: typing.Sequence[T], offset: int) -> typing.List[T]:

	"""Rotate a sequence left by ``offset`` steps, wrapping around."""

	if not sequence:
		return []

	offset %= len(sequence)

	return list(sequence[offset:]) + list(sequence[:offset])


def fisher_yates (items: typing.List[T], rng: polystep.rng.Mulberry32) -> typing.List[T]:

	"""
	Shuffle a list in place (from the tail down) and return it.
	"""

	for i in range(len(items) - 1, 0, -1):
		j = rng.randint_below(i + 1)
		items[i], items[j] = items[j], items[i]

	return items


def count_hits (sequence: typing.Sequence[bool]) -> int:

	"""Number of active steps in a gate sequence."""

	return sum(1 for value in sequence if value)


def round_half_up (value: float) -> int:

	"""Round to the nearest integer with halves going up (``2.5 -> 3``)."""

	return int(math.floor(value + 0.5))


def quantize (value: float, step: float) -> float:

	"""
	Round a value to the nearest multiple of ``step`` (halves up).
	"""

	divisions = round(1.0 / step)

	return round_half_up(value * divisions) / divisions


def clamp (value: T, low: T, high: T) -> T:

	"""Clamp a value into ``[low, high]``."""

	return max(low, min(high, value))  # type: ignore[type-var]
