import polystep.models
import polystep.presets
import polystep.scales


def test_factory_presets () -> None:

	"""Six factory presets are available, in order."""

	names = [preset.name for preset in polystep.presets.PRESETS]

	assert names == ["Bassline", "Hypnotic", "Acid", "Ambient", "Percussive", "Sparse"]


def test_get_preset_by_name () -> None:

	"""Presets are found by exact name."""

	acid = polystep.presets.get_preset_by_name("Acid")

	assert acid is not None
	assert acid.config.pitch.scale == polystep.scales.SCALES["blues"]
	assert acid.config.gate.mode == "random"
	assert acid.config.slide.probability == 0.2


def test_unknown_preset () -> None:

	"""An unknown name returns None."""

	assert polystep.presets.get_preset_by_name("Polka") is None


def test_presets_are_valid_configs () -> None:

	"""Every preset uses known modes and a sane pitch range."""

	for preset in polystep.presets.PRESETS:
		config = preset.config
		assert isinstance(config, polystep.models.RandomConfig)
		assert config.gate.mode in polystep.models.GATE_MODES
		assert 0.0 <= config.gate.fill_min <= config.gate.fill_max <= 1.0
		assert config.pitch.low <= config.pitch.high
		assert config.velocity.low <= config.velocity.high
