import polystep.arpeggiator
import polystep.scales


SCALES = polystep.scales.SCALES


def test_chord_notes () -> None:

	"""Chord tones stack every other degree of seven-note scales."""

	assert polystep.arpeggiator.get_chord_notes(60, SCALES["major"]) == [0, 4, 7, 11]
	assert polystep.arpeggiator.get_chord_notes(60, SCALES["minor"]) == [0, 3, 7, 10]


def test_chord_notes_small_scales () -> None:

	"""Pentatonic and hexatonic scales give their first four degrees."""

	assert polystep.arpeggiator.get_chord_notes(60, SCALES["minor_pentatonic"]) == [0, 3, 5, 7]
	assert polystep.arpeggiator.get_chord_notes(60, SCALES["whole_tone"]) == [0, 2, 4, 6]


def test_up () -> None:

	"""Up walks the chord and wraps."""

	pattern = polystep.arpeggiator.generate_arp_pattern(60, SCALES["minor"], "up", 1, 6)

	assert pattern == [60, 63, 67, 70, 60, 63]


def test_down () -> None:

	"""Down walks the chord from the top."""

	pattern = polystep.arpeggiator.generate_arp_pattern(60, SCALES["minor"], "down", 1, 5)

	assert pattern == [70, 67, 63, 60, 70]


def test_triangle_does_not_repeat_turns () -> None:

	"""Triangle bounces without repeating the top or bottom note."""

	pattern = polystep.arpeggiator.generate_arp_pattern(60, SCALES["minor"], "triangle", 1, 8)

	assert pattern == [60, 63, 67, 70, 67, 63, 60, 63]


def test_octave_range () -> None:

	"""Two octaves double the chord an octave up."""

	pattern = polystep.arpeggiator.generate_arp_pattern(48, SCALES["major"], "up", 2, 8)

	assert pattern == [48, 52, 55, 59, 60, 64, 67, 71]


def test_random_is_seeded () -> None:

	"""Random direction picks chord tones reproducibly."""

	a = polystep.arpeggiator.generate_arp_pattern(60, SCALES["major"], "random", 2, 32, seed=3)
	b = polystep.arpeggiator.generate_arp_pattern(60, SCALES["major"], "random", 2, 32, seed=3)
	c = polystep.arpeggiator.generate_arp_pattern(60, SCALES["major"], "random", 2, 32, seed=4)

	assert a == b
	assert a != c
	assert set(a) <= {60, 64, 67, 71, 72, 76, 79, 83}


def test_notes_above_127_dropped () -> None:

	"""Chord tones past the MIDI range are left out."""

	pattern = polystep.arpeggiator.generate_arp_pattern(120, SCALES["major"], "up", 2, 4)

	assert pattern == [120, 124, 127, 120]


def test_empty_note_set_holds_root () -> None:

	"""When no chord tone fits, the clamped root is held."""

	assert polystep.arpeggiator.generate_arp_pattern(130, SCALES["major"], "up", 1, 3) == [127, 127, 127]
