"""Drift: live, probabilistic regeneration of a running track.

For each of the four lanes with a non-zero rate, one Bernoulli draw per step
(from a single shared stream) picks the steps to change. A full replacement
lane is generated from the track's random config with a derived seed and
only the picked steps are spliced in. Compound steps keep the fields that
drift does not own: a drifted gate step keeps its length and ratchet, a
drifted pitch step keeps its slide.

Lanes that were not touched keep their identity, and a track where nothing
was picked comes back as the very same object.
"""

import dataclasses
import typing

import polystep.constants
import polystep.models
import polystep.randomizer
import polystep.rng

T = typing.TypeVar("T")


def is_mutate_active (config: polystep.models.MutateConfig) -> bool:

	"""True when any lane has a drift rate above zero."""

	return config.gate > 0 or config.pitch > 0 or config.velocity > 0 or config.mod > 0


def _pick_indices (length: int, rate: float, rng: polystep.rng.Mulberry32) -> typing.List[int]:

	return [i for i in range(length) if rng.chance(rate)]


def _splice (
	steps: typing.Tuple[T, ...],
	indices: typing.Sequence[int],
	replace: typing.Callable[[T, int], T]
) -> typing.Tuple[T, ...]:

	"""Apply ``replace(old_step, index)`` at the picked indices only."""

	result = list(steps)

	for index in indices:
		result[index] = replace(result[index], index)

	return tuple(result)


def mutate_track (
	track: polystep.models.Track,
	random_config: polystep.models.RandomConfig,
	mutate_config: polystep.models.MutateConfig,
	seed: typing.Optional[int] = None
) -> polystep.models.Track:

	"""Drift a track's gate, pitch, velocity and mod lanes.

	Parameters:
		track: The live track.
		random_config: Constraints for regenerated values.
		mutate_config: Per-lane drift rates (0 disables a lane).
		seed: Base seed. Step selection uses ``seed``; replacement lanes use
			``seed + 10`` (gate) through ``seed + 13`` (mod).

	Returns:
		A new track, or ``track`` itself when no step was selected.
	"""

	if seed is None:
		seed = polystep.rng.default_seed()

	rng = polystep.rng.Mulberry32(seed)
	base = seed + polystep.constants.SEED_OFFSET_MUTATE

	gate_steps = track.gate.steps

	if mutate_config.gate > 0:
		indices = _pick_indices(len(gate_steps), mutate_config.gate, rng)
		if indices:
			fresh_on = polystep.randomizer.randomize_gates(random_config.gate, len(gate_steps), base)
			gate_steps = _splice(gate_steps, indices, lambda step, i: dataclasses.replace(step, on=fresh_on[i]))

	pitch_steps = track.pitch.steps

	if mutate_config.pitch > 0:
		indices = _pick_indices(len(pitch_steps), mutate_config.pitch, rng)
		if indices:
			fresh_notes = polystep.randomizer.randomize_pitch(random_config.pitch, len(pitch_steps), base + 1)
			pitch_steps = _splice(pitch_steps, indices, lambda step, i: dataclasses.replace(step, note=fresh_notes[i]))

	velocity_steps = track.velocity.steps

	if mutate_config.velocity > 0:
		indices = _pick_indices(len(velocity_steps), mutate_config.velocity, rng)
		if indices:
			fresh_velocity = polystep.randomizer.randomize_velocity(random_config.velocity, len(velocity_steps), base + 2)
			velocity_steps = _splice(velocity_steps, indices, lambda step, i: fresh_velocity[i])

	mod_steps = track.mod.steps

	if mutate_config.mod > 0:
		indices = _pick_indices(len(mod_steps), mutate_config.mod, rng)
		if indices:
			fresh_mod = polystep.randomizer.randomize_mod(random_config.mod, len(mod_steps), base + 3)
			mod_steps = _splice(mod_steps, indices, lambda step, i: fresh_mod[i])

	if (
		gate_steps is track.gate.steps and pitch_steps is track.pitch.steps
		and velocity_steps is track.velocity.steps and mod_steps is track.mod.steps
	):
		return track

	return dataclasses.replace(
		track,
		gate = track.gate if gate_steps is track.gate.steps else dataclasses.replace(track.gate, steps=gate_steps),
		pitch = track.pitch if pitch_steps is track.pitch.steps else dataclasses.replace(track.pitch, steps=pitch_steps),
		velocity = track.velocity if velocity_steps is track.velocity.steps else dataclasses.replace(track.velocity, steps=velocity_steps),
		mod = track.mod if mod_steps is track.mod.steps else dataclasses.replace(track.mod, steps=mod_steps),
	)
