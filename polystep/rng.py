"""Deterministic 32-bit pseudo-random stream.

Every generator in polystep takes an integer seed and draws from a
:class:`Mulberry32` built from it, so the same seed always reproduces the
same pattern. Tasks that share a top-level seed use derived seeds
(``seed + 1``, ``seed + 2``...) to stay independent of one another.
"""

import time
import typing

T = typing.TypeVar("T")

_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_SCALE = 4294967296.0


class Mulberry32:

	"""
	Small, fast PRNG holding a single 32-bit word of state.
	"""

	def __init__ (self, seed: int) -> None:

		"""
		Seed the generator. Any integer is accepted and reduced modulo 2**32.
		"""

		self.state = seed & _MASK

	def next (self) -> float:

		"""
		Advance the state and return a float in [0, 1).
		"""

		self.state = (self.state + _INCREMENT) & _MASK
		t = self.state

		r = ((t ^ (t >> 15)) * (t | 1)) & _MASK
		r = ((r + (((r ^ (r >> 7)) * (r | 61)) & _MASK)) & _MASK) ^ r

		return ((r ^ (r >> 14)) & _MASK) / _SCALE

	def randint_below (self, n: int) -> int:

		"""Return an integer in [0, n)."""

		return int(self.next() * n)

	def chance (self, probability: float) -> bool:

		"""Bernoulli draw: True with the given probability."""

		return self.next() < probability

	def choice (self, items: typing.Sequence[T]) -> T:

		"""Pick one item uniformly."""

		return items[self.randint_below(len(items))]


def default_seed () -> int:

	"""
	Wall-clock seed in milliseconds, used when a command is issued without one.
	"""

	return int(time.time() * 1000)
