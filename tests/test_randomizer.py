import pytest

import polystep.models
import polystep.randomizer
import polystep.scales
import polystep.sequence_utils


SubtrackId = polystep.models.SubtrackId


# ---------------------------------------------------------------------------
# gates
# ---------------------------------------------------------------------------

def test_gates_deterministic () -> None:

	"""The same seed gives the same gate pattern; different seeds usually differ."""

	config = polystep.models.GateConfig()

	a = polystep.randomizer.randomize_gates(config, 16, seed=42)
	b = polystep.randomizer.randomize_gates(config, 16, seed=42)

	assert a == b
	assert any(polystep.randomizer.randomize_gates(config, 16, seed=s) != a for s in range(43, 53))


def test_gate_hits_within_fill_range () -> None:

	"""Hit counts stay between the rounded minimum and maximum fill."""

	for mode in ("random", "euclidean"):
		for seed in range(50):
			pattern = polystep.randomizer.randomize_gates(polystep.models.GateConfig(fill_min=0.25, fill_max=0.5, mode=mode), 16, seed)
			assert len(pattern) == 16
			assert 4 <= polystep.sequence_utils.count_hits(pattern) <= 8


def test_euclidean_without_offset_starts_on_downbeat () -> None:

	"""Without a random offset the euclidean pattern is unrotated."""

	config = polystep.models.GateConfig(fill_min=0.25, fill_max=0.25, mode="euclidean", random_offset=False)
	pattern = polystep.randomizer.randomize_gates(config, 16, seed=9)

	assert pattern == polystep.sequence_utils.euclidean(4, 16)


def test_full_fill_all_on () -> None:

	"""A fill range of exactly 1.0 turns every step on."""

	config = polystep.models.GateConfig(fill_min=1.0, fill_max=1.0, mode="random")

	assert polystep.randomizer.randomize_gates(config, 12, seed=1) == [True] * 12


# ---------------------------------------------------------------------------
# pitch
# ---------------------------------------------------------------------------

def test_pitch_in_scale_and_range () -> None:

	"""Every note is a scale tone inside the configured range."""

	config = polystep.models.PitchConfig(low=48, high=72, scale=polystep.scales.SCALES["dorian"], root=50, max_notes=0)
	allowed = set(polystep.scales.get_scale_notes(50, config.scale, 48, 72))

	for seed in range(20):
		notes = polystep.randomizer.randomize_pitch(config, 32, seed)
		assert len(notes) == 32
		assert set(notes) <= allowed


def test_pitch_max_notes () -> None:

	"""At most max_notes distinct notes are used."""

	config = polystep.models.PitchConfig(max_notes=3)

	for seed in range(20):
		notes = polystep.randomizer.randomize_pitch(config, 64, seed)
		assert len(set(notes)) <= 3


def test_pitch_empty_range_falls_back_to_low () -> None:

	"""A range with no scale tones repeats the low note."""

	config = polystep.models.PitchConfig(low=61, high=62, scale=polystep.scales.SCALES["minor_pentatonic"], root=60)

	assert polystep.randomizer.randomize_pitch(config, 4, seed=3) == [61, 61, 61, 61]


# ---------------------------------------------------------------------------
# velocity, gate length, ratchet, slide, mod
# ---------------------------------------------------------------------------

def test_velocity_range () -> None:

	"""Velocities are integers inside [low, high]."""

	config = polystep.models.VelocityConfig(low=90, high=100)
	values = polystep.randomizer.randomize_velocity(config, 200, seed=5)

	assert all(90 <= v <= 100 for v in values)
	assert all(isinstance(v, int) for v in values)


def test_gate_length_always_clamped () -> None:

	"""Gate lengths never leave [0.05, 1.0], even from a wider config."""

	config = polystep.models.GateLengthConfig(min=0.0, max=2.0)

	for seed in range(20):
		values = polystep.randomizer.randomize_gate_length(config, 32, seed)
		assert all(0.05 <= v <= 1.0 for v in values)


def test_gate_length_quantised () -> None:

	"""Gate lengths are multiples of 0.05."""

	config = polystep.models.GateLengthConfig(min=0.1, max=0.9)

	for value in polystep.randomizer.randomize_gate_length(config, 64, seed=4):
		assert value * 20 == pytest.approx(round(value * 20))


def test_fixed_gate_length () -> None:

	"""Equal min and max give a constant gate length."""

	values = polystep.randomizer.randomize_gate_length(polystep.models.GateLengthConfig(), 8, seed=1)

	assert values == [pytest.approx(0.5)] * 8


def test_ratchets_off_by_default () -> None:

	"""Probability 0 leaves every step a single trigger."""

	assert polystep.randomizer.randomize_ratchets(polystep.models.RatchetConfig(), 16, seed=1) == [1] * 16


def test_ratchets_always_on () -> None:

	"""Probability 1 gives 2 to max_ratchet triggers on every step."""

	values = polystep.randomizer.randomize_ratchets(polystep.models.RatchetConfig(max_ratchet=4, probability=1.0), 64, seed=2)

	assert all(2 <= v <= 4 for v in values)


def test_ratchets_capped () -> None:

	"""max_ratchet above 4 is capped at 4."""

	values = polystep.randomizer.randomize_ratchets(polystep.models.RatchetConfig(max_ratchet=9, probability=1.0), 64, seed=2)

	assert max(values) <= 4


def test_slides () -> None:

	"""Slides are either 0 or the default slide time."""

	assert polystep.randomizer.randomize_slides(0.0, 8, seed=1) == [0.0] * 8
	assert polystep.randomizer.randomize_slides(1.0, 8, seed=1) == [pytest.approx(0.1)] * 8


def test_mod_range () -> None:

	"""Mod values stay inside the configured range."""

	values = polystep.randomizer.randomize_mod(polystep.models.ModConfig(low=0.2, high=0.4), 100, seed=6)

	assert all(0.2 - 1e-9 <= v <= 0.4 + 1e-9 for v in values)


# ---------------------------------------------------------------------------
# randomize_track
# ---------------------------------------------------------------------------

def test_track_lengths_follow_lanes () -> None:

	"""Each array matches its lane; gate length and ratchet follow gate, slide follows pitch."""

	lengths = {SubtrackId.GATE: 16, SubtrackId.PITCH: 12, SubtrackId.VELOCITY: 7, SubtrackId.MOD: 5}
	generated = polystep.randomizer.randomize_track(polystep.models.RandomConfig(), lengths, seed=10)

	assert len(generated.gate) == 16
	assert len(generated.gate_length) == 16
	assert len(generated.ratchet) == 16
	assert len(generated.pitch) == 12
	assert len(generated.slide) == 12
	assert len(generated.velocity) == 7
	assert len(generated.mod) == 5


def test_track_uses_derived_seeds () -> None:

	"""Each parameter comes from its own offset of the base seed."""

	config = polystep.models.RandomConfig()
	lengths = {sid: 16 for sid in SubtrackId}
	generated = polystep.randomizer.randomize_track(config, lengths, seed=500)

	assert list(generated.gate) == polystep.randomizer.randomize_gates(config.gate, 16, 500)
	assert list(generated.pitch) == polystep.randomizer.randomize_pitch(config.pitch, 16, 501)
	assert list(generated.velocity) == polystep.randomizer.randomize_velocity(config.velocity, 16, 502)
	assert list(generated.mod) == polystep.randomizer.randomize_mod(config.mod, 16, 506)


def test_track_deterministic () -> None:

	"""The same seed regenerates the same track."""

	lengths = {sid: 16 for sid in SubtrackId}

	a = polystep.randomizer.randomize_track(polystep.models.RandomConfig(), lengths, seed=77)
	b = polystep.randomizer.randomize_track(polystep.models.RandomConfig(), lengths, seed=77)

	assert a == b
