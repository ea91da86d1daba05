"""Factory presets: named random configs for common musical roles.

User presets are stored on the sequencer state as
:class:`~polystep.models.UserPreset`; both kinds are opaque ``{name, config}``
pairs to the engine.
"""

import typing

import polystep.models
import polystep.scales

_models = polystep.models
_scales = polystep.scales.SCALES


def _preset (
	name: str,
	pitch: typing.Tuple[int, int, str, int, int],
	gate: typing.Tuple[float, float, str, bool],
	velocity: typing.Tuple[int, int],
	slide: float,
	mod: typing.Tuple[float, float]
) -> _models.UserPreset:

	low, high, scale, root, max_notes = pitch
	fill_min, fill_max, mode, random_offset = gate

	return _models.UserPreset(
		name = name,
		config = _models.RandomConfig(
			pitch = _models.PitchConfig(low=low, high=high, scale=_scales[scale], root=root, max_notes=max_notes),
			gate = _models.GateConfig(fill_min=fill_min, fill_max=fill_max, mode=mode, random_offset=random_offset),
			velocity = _models.VelocityConfig(low=velocity[0], high=velocity[1]),
			slide = _models.SlideConfig(probability=slide),
			mod = _models.ModConfig(low=mod[0], high=mod[1]),
		),
	)


PRESETS: typing.Tuple[_models.UserPreset, ...] = (
	#        name          pitch (low, high, scale, root, max)         gate (min, max, mode, offset)        vel        slide  mod
	_preset("Bassline",   (36, 48, "minor_pentatonic", 36, 4), (0.5,  0.75, "euclidean", True),  (80, 120),  0.0, (0.0, 0.5)),
	_preset("Hypnotic",   (48, 60, "minor_pentatonic", 48, 3), (0.75, 1.0,  "euclidean", True),  (90, 110),  0.0, (0.2, 0.8)),
	_preset("Acid",       (36, 60, "blues",            36, 5), (0.5,  0.85, "random",    False), (64, 127),  0.2, (0.0, 1.0)),
	_preset("Ambient",    (48, 72, "major",            48, 0), (0.1,  0.3,  "random",    False), (40, 80),   0.0, (0.3, 0.7)),
	_preset("Percussive", (60, 72, "chromatic",        60, 0), (0.6,  0.9,  "euclidean", True),  (100, 127), 0.0, (0.0, 0.3)),
	_preset("Sparse",     (48, 67, "dorian",           48, 4), (0.15, 0.35, "euclidean", True),  (50, 100),  0.0, (0.1, 0.6)),
)


def get_preset_by_name (name: str) -> typing.Optional[_models.UserPreset]:

	"""Return the factory preset with this name, or None."""

	for preset in PRESETS:
		if preset.name == name:
			return preset

	return None
