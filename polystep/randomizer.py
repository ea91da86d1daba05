"""Seeded pattern generators for every parameter of a track.

Each function is pure: ``(config, length, seed) -> list``. The same seed
always yields the same list. ``randomize_track`` runs all of them with
derived seeds so each parameter has its own stream.
"""

import dataclasses
import typing

import polystep.constants
import polystep.models
import polystep.rng
import polystep.scales
import polystep.sequence_utils


@dataclasses.dataclass(frozen=True)
class GeneratedTrack:

	"""
	Raw per-parameter arrays produced by :func:`randomize_track`.

	The caller folds ``gate``/``gate_length``/``ratchet`` into gate steps and
	``pitch``/``slide`` into pitch steps.
	"""

	gate: typing.Tuple[bool, ...]
	pitch: typing.Tuple[int, ...]
	velocity: typing.Tuple[int, ...]
	gate_length: typing.Tuple[float, ...]
	ratchet: typing.Tuple[int, ...]
	slide: typing.Tuple[float, ...]
	mod: typing.Tuple[float, ...]


def _resolve_seed (seed: typing.Optional[int]) -> int:

	return polystep.rng.default_seed() if seed is None else seed


def randomize_gates (config: polystep.models.GateConfig, length: int, seed: typing.Optional[int] = None) -> typing.List[bool]:

	"""
	Generate a gate pattern with a hit count drawn from the fill range.

	In ``"euclidean"`` mode the hits are spread with Bjorklund's algorithm
	(rotated by a random offset when ``random_offset`` is set). In
	``"random"`` mode exactly that many hits are shuffled into place.
	"""

	rng = polystep.rng.Mulberry32(_resolve_seed(seed))

	fill_min = polystep.sequence_utils.round_half_up(config.fill_min * length)
	fill_max = polystep.sequence_utils.round_half_up(config.fill_max * length)
	hits = fill_min + rng.randint_below(fill_max - fill_min + 1)

	if config.mode == "euclidean":

		pattern = polystep.sequence_utils.euclidean(hits, length)

		if config.random_offset and length > 0:
			return polystep.sequence_utils.rotate(pattern, rng.randint_below(length))

		return pattern

	pattern = [i < hits for i in range(length)]

	return polystep.sequence_utils.fisher_yates(pattern, rng)


def randomize_pitch (config: polystep.models.PitchConfig, length: int, seed: typing.Optional[int] = None) -> typing.List[int]:

	"""
	Draw notes uniformly from the scale tones in ``[low, high]``.

	When ``max_notes`` is positive and the range holds more tones than that,
	a random subset of ``max_notes`` tones is chosen first. A range with no
	scale tones yields ``low`` on every step.
	"""

	rng = polystep.rng.Mulberry32(_resolve_seed(seed))
	notes = polystep.scales.get_scale_notes(config.root, config.scale, config.low, config.high)

	if not notes:
		return [config.low] * length

	if config.max_notes > 0 and len(notes) > config.max_notes:
		shuffled = polystep.sequence_utils.fisher_yates(list(notes), rng)
		notes = sorted(shuffled[:config.max_notes])

	return [rng.choice(notes) for _ in range(length)]


def randomize_velocity (config: polystep.models.VelocityConfig, length: int, seed: typing.Optional[int] = None) -> typing.List[int]:

	"""Uniform integer velocities in ``[low, high]``."""

	rng = polystep.rng.Mulberry32(_resolve_seed(seed))
	span = config.high - config.low + 1

	return [config.low + rng.randint_below(span) for _ in range(length)]


def randomize_gate_length (config: polystep.models.GateLengthConfig, length: int, seed: typing.Optional[int] = None) -> typing.List[float]:

	"""
	Gate lengths in ``[max(0.05, min), min(1.0, max)]``, quantised to 0.05.
	"""

	rng = polystep.rng.Mulberry32(_resolve_seed(seed))

	low = max(polystep.constants.MIN_GATE_LENGTH, config.min)
	high = min(polystep.constants.MAX_GATE_LENGTH, config.max)
	span = high - low

	values = []

	for _ in range(length):
		raw = low + rng.next() * span
		value = polystep.sequence_utils.quantize(raw, 0.05)
		values.append(polystep.sequence_utils.clamp(value, polystep.constants.MIN_GATE_LENGTH, polystep.constants.MAX_GATE_LENGTH))

	return values


def randomize_ratchets (config: polystep.models.RatchetConfig, length: int, seed: typing.Optional[int] = None) -> typing.List[int]:

	"""
	Per step, with ``probability``, a ratchet count in ``[2, max_ratchet]``; otherwise 1.
	"""

	rng = polystep.rng.Mulberry32(_resolve_seed(seed))
	max_ratchet = min(config.max_ratchet, polystep.constants.MAX_RATCHET)

	values = []

	for _ in range(length):

		if config.probability > 0 and rng.chance(config.probability) and max_ratchet > 1:
			values.append(2 + rng.randint_below(max_ratchet - 1))
		else:
			values.append(1)

	return values


def randomize_slides (probability: float, length: int, seed: typing.Optional[int] = None) -> typing.List[float]:

	"""Per step, with ``probability``, the default slide time (0.10 s); otherwise 0."""

	rng = polystep.rng.Mulberry32(_resolve_seed(seed))

	return [
		polystep.constants.DEFAULT_SLIDE_TIME if probability > 0 and rng.chance(probability) else 0.0
		for _ in range(length)
	]


def randomize_mod (config: polystep.models.ModConfig, length: int, seed: typing.Optional[int] = None) -> typing.List[float]:

	"""Uniform mod values in ``[low, high]``, quantised to 0.01."""

	rng = polystep.rng.Mulberry32(_resolve_seed(seed))
	span = config.high - config.low

	return [polystep.sequence_utils.quantize(config.low + rng.next() * span, 0.01) for _ in range(length)]


def randomize_track (
	config: polystep.models.RandomConfig,
	lengths: typing.Mapping[polystep.models.SubtrackId, int],
	seed: typing.Optional[int] = None
) -> GeneratedTrack:

	"""
	Generate every parameter of a track, each from its own derived seed.

	Parameters:
		config: The track's random config.
		lengths: Length of each lane, keyed by :class:`~polystep.models.SubtrackId`.
			Gate length and ratchet follow the gate lane; slide follows the pitch lane.
		seed: Base seed (wall clock when omitted).
	"""

	seed = _resolve_seed(seed)
	constants = polystep.constants
	sid = polystep.models.SubtrackId

	gate_len = lengths[sid.GATE]
	pitch_len = lengths[sid.PITCH]

	return GeneratedTrack(
		gate = tuple(randomize_gates(config.gate, gate_len, seed + constants.SEED_OFFSET_GATE)),
		pitch = tuple(randomize_pitch(config.pitch, pitch_len, seed + constants.SEED_OFFSET_PITCH)),
		velocity = tuple(randomize_velocity(config.velocity, lengths[sid.VELOCITY], seed + constants.SEED_OFFSET_VELOCITY)),
		gate_length = tuple(randomize_gate_length(config.gate_length, gate_len, seed + constants.SEED_OFFSET_GATE_LENGTH)),
		ratchet = tuple(randomize_ratchets(config.ratchet, gate_len, seed + constants.SEED_OFFSET_RATCHET)),
		slide = tuple(randomize_slides(config.slide.probability, pitch_len, seed + constants.SEED_OFFSET_SLIDE)),
		mod = tuple(randomize_mod(config.mod, lengths[sid.MOD], seed + constants.SEED_OFFSET_MOD)),
	)
