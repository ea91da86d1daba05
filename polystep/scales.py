import dataclasses
import typing


@dataclasses.dataclass(frozen=True)
class Scale:

	"""
	A named set of semitone offsets from a root, e.g. ``(0, 2, 4, 5, 7, 9, 11)`` for major.
	"""

	name: str
	intervals: typing.Tuple[int, ...]


SCALES: typing.Dict[str, Scale] = {
	"major":            Scale("Major",            (0, 2, 4, 5, 7, 9, 11)),
	"minor":            Scale("Minor",            (0, 2, 3, 5, 7, 8, 10)),
	"dorian":           Scale("Dorian",           (0, 2, 3, 5, 7, 9, 10)),
	"phrygian":         Scale("Phrygian",         (0, 1, 3, 5, 7, 8, 10)),
	"mixolydian":       Scale("Mixolydian",       (0, 2, 4, 5, 7, 9, 10)),
	"minor_pentatonic": Scale("Minor Pentatonic", (0, 3, 5, 7, 10)),
	"major_pentatonic": Scale("Major Pentatonic", (0, 2, 4, 7, 9)),
	"blues":            Scale("Blues",            (0, 3, 5, 6, 7, 10)),
	"chromatic":        Scale("Chromatic",        (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11)),
	"whole_tone":       Scale("Whole Tone",       (0, 2, 4, 6, 8, 10)),
}


def get_scale (name: str) -> Scale:

	"""
	Return a registered scale by key (e.g. ``"minor_pentatonic"``).
	"""

	if name not in SCALES:
		raise ValueError(f"Unknown scale: {name!r}. Available: {sorted(SCALES)}")

	return SCALES[name]


def register_scale (key: str, intervals: typing.Sequence[int], name: typing.Optional[str] = None) -> Scale:

	"""Register a custom scale so configs and presets can refer to it by key.

	Parameters:
		key: Registry key used in configuration files.
		intervals: Semitone offsets from the root. Values are reduced modulo 12,
			de-duplicated and sorted; 0 is always included.
		name: Display name (defaults to the key).

	Example:
		```python
		hirajoshi = polystep.scales.register_scale("hirajoshi", [0, 2, 3, 7, 8])
		```
	"""

	offsets = sorted({int(i) % 12 for i in intervals} | {0})
	scale = Scale(name or key, tuple(offsets))
	SCALES[key] = scale

	return scale


def get_scale_notes (root: int, scale: Scale, low: int, high: int) -> typing.List[int]:

	"""
	Return every MIDI note in ``[low, high]`` that belongs to the scale on ``root``.
	"""

	return [note for note in range(low, high + 1) if (note - root) % 12 in scale.intervals]


def snap_to_scale (note: int, root: int, scale: Scale) -> int:

	"""
	Snap a MIDI note to the nearest scale tone, searching outward one semitone
	at a time. When two tones are equally close the lower one wins.
	"""

	if (note - root) % 12 in scale.intervals:
		return note

	for offset in range(1, 7):

		if (note - offset - root) % 12 in scale.intervals:
			return note - offset

		if (note + offset - root) % 12 in scale.intervals:
			return note + offset

	return note
