"""Chord-tone arpeggios for the pitch lane.

Chord tones are taken from the scale itself (root, 3rd, 5th, 7th by stacking
every other degree), repeated over ``octave_range`` octaves and walked in a
direction.
"""

import typing

import polystep.constants
import polystep.rng
import polystep.scales
import polystep.sequence_utils


def get_chord_notes (root: int, scale: polystep.scales.Scale) -> typing.List[int]:

	"""
	Chord intervals (semitones above ``root``) drawn from a scale.

	Scales of four degrees or fewer are used whole; five and six degree scales
	give their first four degrees; larger scales give degrees 0, 2, 4 and 6.

	Example:
		```python
		get_chord_notes(60, polystep.scales.SCALES["major"])  # -> [0, 4, 7, 11]
		```
	"""

	intervals = list(scale.intervals)

	if len(intervals) <= 4:
		return intervals

	if len(intervals) < 7:
		return intervals[:4]

	return intervals[0:7:2]


def _build_note_set (root: int, chord_intervals: typing.Sequence[int], octave_range: int) -> typing.List[int]:

	notes = []

	for octave in range(octave_range):
		for interval in chord_intervals:
			note = root + interval + octave * 12
			if polystep.constants.MIN_NOTE <= note <= polystep.constants.MAX_NOTE:
				notes.append(note)

	return notes


def generate_arp_pattern (
	root: int,
	scale: polystep.scales.Scale,
	direction: str,
	octave_range: int,
	length: int,
	seed: typing.Optional[int] = None
) -> typing.List[int]:

	"""Walk the chord tones of ``scale`` for ``length`` steps.

	Parameters:
		root: Root MIDI note.
		scale: Scale the chord tones come from.
		direction: ``"up"``, ``"down"``, ``"triangle"`` (ping-pong without
			repeating the turning notes) or ``"random"`` (seeded uniform picks).
		octave_range: Octaves spanned, 1-4.
		length: Steps to generate.
		seed: PRNG seed for ``"random"``.
	"""

	note_set = _build_note_set(root, get_chord_notes(root, scale), octave_range)

	if not note_set:
		return [polystep.sequence_utils.clamp(root, polystep.constants.MIN_NOTE, polystep.constants.MAX_NOTE)] * length

	if direction == "random":
		rng = polystep.rng.Mulberry32(polystep.rng.default_seed() if seed is None else seed)
		return [rng.choice(note_set) for _ in range(length)]

	if direction == "down":
		cycle = list(reversed(note_set))

	elif direction == "triangle":
		cycle = note_set + note_set[-2:0:-1]

	else:
		cycle = note_set

	return [cycle[i % len(cycle)] for i in range(length)]
