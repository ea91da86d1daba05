"""YAML session configuration.

A configuration file describes a starting session: tempo, seed, and for each
track its lane geometry, the preset and random overrides it is generated
from, and its drift, LFO, arpeggiator and transpose settings. Routing and
MIDI channels are given per output.

Example:
	```yaml
	bpm: 128
	seed: 42
	tracks:
	  - preset: Bassline
	    length: {gate: 16, pitch: 12}
	    mutate: {trigger: bars, bars: 4, pitch: 0.25}
	  - preset: Acid
	    clock_divider: 2
	    arp: {enabled: true, direction: triangle, octave_range: 2}
	routing:
	  - {gate: 0, pitch: 1, velocity: 0, mod: 0}
	midi:
	  - {channel: 1}
	  - {channel: 2}
	```
"""

import dataclasses
import logging
import os
import typing

import yaml

import polystep.constants
import polystep.models
import polystep.presets
import polystep.rng
import polystep.scales
import polystep.sequencer


logger = logging.getLogger(__name__)

SubtrackId = polystep.models.SubtrackId

# Distance between the base seeds of neighbouring tracks.
TRACK_SEED_STRIDE = 100


class ConfigError (ValueError):

	"""
	Raised when a configuration mapping cannot be turned into a session.
	"""


def load_config (config_path: str = 'polystep.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:

		try:
			data = yaml.safe_load(f)
		except yaml.YAMLError as e:
			raise ConfigError(f"Could not parse {config_path}: {e}") from e

	if data is None:
		return {}

	if not isinstance(data, dict):
		raise ConfigError(f"{config_path} must contain a mapping at the top level")

	return data


# ─── Record builders ──────────────────────────────────────────────────────────


def _mapping (data: typing.Any, section: str) -> dict:

	if data is None:
		return {}

	if not isinstance(data, dict):
		raise ConfigError(f"'{section}' must be a mapping, got {type(data).__name__}")

	return data


def _merge (record: typing.Any, data: typing.Any, section: str) -> typing.Any:

	"""Overlay the keys of ``data`` onto a frozen record, rejecting unknown keys."""

	data = _mapping(data, section)

	if not data:
		return record

	names = {field.name for field in dataclasses.fields(record)}
	unknown = sorted(set(data) - names)

	if unknown:
		raise ConfigError(f"Unknown key(s) in '{section}': {', '.join(unknown)}")

	return dataclasses.replace(record, **data)


def _check_choice (value: str, choices: typing.Sequence[str], section: str) -> None:

	if value not in choices:
		raise ConfigError(f"'{section}' must be one of {', '.join(choices)}; got {value!r}")


def build_random_config (data: typing.Any, base: typing.Optional[polystep.models.RandomConfig] = None) -> polystep.models.RandomConfig:

	"""
	Build a random config from a mapping of per-parameter overrides.

	Parameters:
		data: Mapping with any of ``pitch``, ``gate``, ``velocity``,
			``gate_length``, ``ratchet``, ``slide`` and ``mod``, each itself a
			mapping of field overrides. ``pitch.scale`` is a scale key such as
			``"dorian"``.
		base: Config to overlay onto (defaults when omitted).
	"""

	data = dict(_mapping(data, "random"))
	config = base if base is not None else polystep.models.RandomConfig()

	unknown = sorted(set(data) - {field.name for field in dataclasses.fields(config)})

	if unknown:
		raise ConfigError(f"Unknown key(s) in 'random': {', '.join(unknown)}")

	pitch_data = dict(_mapping(data.get("pitch"), "random.pitch"))

	if "scale" in pitch_data:
		try:
			pitch_data["scale"] = polystep.scales.get_scale(pitch_data["scale"])
		except ValueError as e:
			raise ConfigError(str(e)) from e

	gate = _merge(config.gate, data.get("gate"), "random.gate")
	_check_choice(gate.mode, polystep.models.GATE_MODES, "random.gate.mode")
	_check_choice(gate.smart_density, polystep.models.SMART_DENSITIES, "random.gate.smart_density")

	return dataclasses.replace(
		config,
		pitch = _merge(config.pitch, pitch_data, "random.pitch"),
		gate = gate,
		velocity = _merge(config.velocity, data.get("velocity"), "random.velocity"),
		gate_length = _merge(config.gate_length, data.get("gate_length"), "random.gate_length"),
		ratchet = _merge(config.ratchet, data.get("ratchet"), "random.ratchet"),
		slide = _merge(config.slide, data.get("slide"), "random.slide"),
		mod = _merge(config.mod, data.get("mod"), "random.mod"),
	)


def build_mutate_config (data: typing.Any) -> polystep.models.MutateConfig:

	"""Build a drift config; ``trigger`` must be ``loop`` or ``bars``."""

	config = _merge(polystep.models.MutateConfig(), data, "mutate")
	_check_choice(config.trigger, polystep.models.MUTATE_TRIGGERS, "mutate.trigger")

	return config


def build_lfo_config (data: typing.Any) -> polystep.models.LfoConfig:

	config = _merge(polystep.models.LfoConfig(), data, "lfo")
	_check_choice(config.waveform, polystep.models.LFO_WAVEFORMS, "lfo.waveform")

	return config


def build_arp_config (data: typing.Any) -> polystep.models.ArpConfig:

	config = _merge(polystep.models.ArpConfig(), data, "arp")
	_check_choice(config.direction, polystep.models.ARP_DIRECTIONS, "arp.direction")

	return config


def _per_lane (value: typing.Any, section: str) -> typing.Dict[SubtrackId, int]:

	"""Expand an int (all lanes) or a lane-name mapping into per-lane values."""

	if value is None:
		return {}

	if isinstance(value, int):
		return {sid: value for sid in SubtrackId}

	lanes = {}

	for name, lane_value in _mapping(value, section).items():

		try:
			sid = SubtrackId(name)
		except ValueError as e:
			raise ConfigError(f"Unknown lane {name!r} in '{section}'") from e

		lanes[sid] = int(lane_value)

	return lanes


# ─── Session ──────────────────────────────────────────────────────────────────


def _apply_track (
	state: polystep.models.SequencerState,
	index: int,
	data: typing.Any,
	seed: int
) -> polystep.models.SequencerState:

	"""Configure one track and generate its patterns."""

	data = _mapping(data, f"tracks[{index}]")
	section = f"tracks[{index}]"

	for sid, length in _per_lane(data.get("length"), f"{section}.length").items():
		state = polystep.sequencer.set_subtrack_length(state, index, sid, length)

	for sid, divider in _per_lane(data.get("dividers"), f"{section}.dividers").items():
		state = polystep.sequencer.set_subtrack_clock_divider(state, index, sid, divider)

	if "clock_divider" in data:
		state = polystep.sequencer.set_track_clock_divider(state, index, int(data["clock_divider"]))

	random_config = polystep.models.RandomConfig()

	if "preset" in data:
		preset = polystep.presets.get_preset_by_name(data["preset"])
		if preset is None:
			raise ConfigError(f"Unknown preset {data['preset']!r} in '{section}'")
		random_config = preset.config

	random_config = build_random_config(data.get("random"), base=random_config)

	state = polystep.sequencer.set_random_config(state, index, random_config)
	state = polystep.sequencer.set_mutate_config(state, index, build_mutate_config(data.get("mutate")))
	state = polystep.sequencer.set_lfo_config(state, index, build_lfo_config(data.get("lfo")))
	state = polystep.sequencer.set_arp_config(state, index, build_arp_config(data.get("arp")))
	state = polystep.sequencer.set_transpose_config(
		state, index, _merge(polystep.models.TransposeConfig(), data.get("transpose"), f"{section}.transpose")
	)

	state = polystep.sequencer.randomize_track_pattern(state, index, seed)

	if state.random_configs[index].gate.smart_bars > 1:
		state = polystep.sequencer.randomize_gate_pattern(state, index, seed)

	if state.arp_configs[index].enabled:
		state = polystep.sequencer.randomize_pitch_pattern(state, index, seed)

	if state.lfo_configs[index].enabled:
		state = polystep.sequencer.regenerate_lfo(state, index)

	return state


def build_state (config: typing.Optional[dict] = None, seed: typing.Optional[int] = None) -> polystep.models.SequencerState:

	"""Turn a configuration mapping into a fully generated session.

	Tracks not listed in ``tracks`` are generated from default random configs.
	Without a ``midi`` section every output renders on the channel matching
	its number; listed outputs are enabled unless they say otherwise.

	Parameters:
		config: Mapping as returned by :func:`load_config`.
		seed: Overrides the ``seed`` key. Without either, the wall clock is used.
	"""

	config = _mapping(config, "config")
	state = polystep.sequencer.create_sequencer()

	if "bpm" in config:
		state = polystep.sequencer.set_bpm(state, config["bpm"])

	if seed is None:
		seed = config.get("seed")

	if seed is None:
		seed = polystep.rng.default_seed()

	tracks = config.get("tracks") or []

	if not isinstance(tracks, list):
		raise ConfigError("'tracks' must be a list")

	if len(tracks) > polystep.constants.NUM_TRACKS:
		logger.warning(f"Only {polystep.constants.NUM_TRACKS} tracks are supported; ignoring {len(tracks) - polystep.constants.NUM_TRACKS}")

	for index in range(polystep.constants.NUM_TRACKS):
		data = tracks[index] if index < len(tracks) else None
		state = _apply_track(state, index, data, seed + index * TRACK_SEED_STRIDE)

	routing = config.get("routing")

	if routing is not None:

		if not isinstance(routing, list):
			raise ConfigError("'routing' must be a list")

		for output, route in enumerate(routing[:polystep.constants.NUM_OUTPUTS]):
			for name, source in _mapping(route, f"routing[{output}]").items():
				try:
					sid = SubtrackId(name)
				except ValueError as e:
					raise ConfigError(f"Unknown parameter {name!r} in 'routing[{output}]'") from e
				state = polystep.sequencer.set_output_source(state, output, sid, int(source))

	midi = config.get("midi")

	if midi is None:
		for output in range(polystep.constants.NUM_OUTPUTS):
			state = polystep.sequencer.set_midi_config(state, output, polystep.models.MidiOutputConfig(enabled=True, channel=output + 1))

	else:

		if not isinstance(midi, list):
			raise ConfigError("'midi' must be a list")

		for output, entry in enumerate(midi[:polystep.constants.NUM_OUTPUTS]):
			base = polystep.models.MidiOutputConfig(enabled=True, channel=output + 1)
			state = polystep.sequencer.set_midi_config(state, output, _merge(base, entry, f"midi[{output}]"))

	logger.info(f"Built session at {state.transport.bpm} BPM with seed {seed}")

	return state
