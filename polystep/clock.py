"""Hierarchical clock division.

A subtrack advances once every ``track_divider * subtrack_divider`` master
ticks and wraps at its own length. Lanes with different lengths or dividers
therefore trace independent cycles that only line up again at the least
common multiple of their periods; this is the whole polymeter mechanism.
"""

import polystep.constants


def combined_divider (track_divider: int, subtrack_divider: int) -> int:

	"""Master ticks per step for a lane."""

	return track_divider * subtrack_divider


def should_tick (master_tick: int, track_divider: int, subtrack_divider: int) -> bool:

	"""
	True when a lane advances on this master tick.
	"""

	return master_tick % combined_divider(track_divider, subtrack_divider) == 0


def get_effective_step (master_tick: int, track_divider: int, subtrack_divider: int, subtrack_length: int) -> int:

	"""
	The step index a lane is on at ``master_tick``.

	Example:
		```python
		get_effective_step(7, 1, 1, 3)  # -> 1
		get_effective_step(7, 2, 1, 16) # -> 3
		```
	"""

	return (master_tick // combined_divider(track_divider, subtrack_divider)) % subtrack_length


def loop_count (master_tick: int, track_divider: int, subtrack_divider: int, subtrack_length: int) -> int:

	"""Number of complete loops a lane has played before ``master_tick``."""

	return master_tick // combined_divider(track_divider, subtrack_divider) // subtrack_length


def looped_on_nth (master_tick: int, track_divider: int, subtrack_divider: int, subtrack_length: int, every: int) -> bool:

	"""
	True when the lane wraps back to step 0 between ``master_tick`` and the
	next tick, and the loop being entered is a multiple of ``every``.

	With ``every`` of 1 (or less) every wrap counts. A lane of length 1 never
	wraps from a later step and so never fires.
	"""

	current = get_effective_step(master_tick, track_divider, subtrack_divider, subtrack_length)
	upcoming = get_effective_step(master_tick + 1, track_divider, subtrack_divider, subtrack_length)

	if not (current > 0 and upcoming == 0):
		return False

	if every <= 1:
		return True

	return loop_count(master_tick + 1, track_divider, subtrack_divider, subtrack_length) % every == 0


def bar_boundary (master_tick: int, bars: int, steps_per_bar: int = polystep.constants.STEPS_PER_BAR) -> bool:

	"""
	True on every ``bars``-th bar line after the start (tick 0 never counts).
	"""

	interval = bars * steps_per_bar

	return interval > 0 and master_tick > 0 and master_tick % interval == 0
