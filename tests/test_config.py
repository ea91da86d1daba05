import logging
import pathlib

import pytest

import polystep.config
import polystep.models
import polystep.presets
import polystep.scales


SubtrackId = polystep.models.SubtrackId


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------

def test_missing_file_gives_defaults (tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture) -> None:

	"""A missing file logs a warning and returns an empty mapping."""

	with caplog.at_level(logging.WARNING):
		config = polystep.config.load_config(str(tmp_path / "absent.yaml"))

	assert config == {}
	assert "not found" in caplog.text


def test_loads_yaml (tmp_path: pathlib.Path) -> None:

	"""YAML mappings are returned as dictionaries."""

	path = tmp_path / "session.yaml"
	path.write_text("bpm: 128\nseed: 4\ntracks:\n  - preset: Acid\n")

	assert polystep.config.load_config(str(path)) == {"bpm": 128, "seed": 4, "tracks": [{"preset": "Acid"}]}


def test_empty_file (tmp_path: pathlib.Path) -> None:

	"""An empty file is an empty configuration."""

	path = tmp_path / "empty.yaml"
	path.write_text("")

	assert polystep.config.load_config(str(path)) == {}


def test_malformed_yaml_raises (tmp_path: pathlib.Path) -> None:

	"""Unparseable YAML raises ConfigError, which is a ValueError."""

	path = tmp_path / "broken.yaml"
	path.write_text("bpm: [1, 2\n")

	with pytest.raises(polystep.config.ConfigError):
		polystep.config.load_config(str(path))

	assert issubclass(polystep.config.ConfigError, ValueError)


def test_top_level_must_be_mapping (tmp_path: pathlib.Path) -> None:

	"""A list at the top level is rejected."""

	path = tmp_path / "list.yaml"
	path.write_text("- 1\n- 2\n")

	with pytest.raises(polystep.config.ConfigError):
		polystep.config.load_config(str(path))


# ---------------------------------------------------------------------------
# build_state
# ---------------------------------------------------------------------------

def test_build_state_is_seeded () -> None:

	"""The same seed builds the same session; the seed argument overrides the key."""

	a = polystep.config.build_state({"seed": 7})
	b = polystep.config.build_state({"seed": 7})
	c = polystep.config.build_state({"seed": 1}, seed=7)

	assert a == b
	assert a == c


def test_bpm () -> None:

	"""The bpm key sets the tempo, clamped to range."""

	assert polystep.config.build_state({"bpm": 128, "seed": 1}).transport.bpm == 128
	assert polystep.config.build_state({"bpm": 999, "seed": 1}).transport.bpm == 300


def test_preset_and_overrides () -> None:

	"""A preset is the base and random overrides are laid on top."""

	state = polystep.config.build_state({
		"seed": 1,
		"tracks": [{"preset": "Acid", "random": {"velocity": {"low": 1}, "pitch": {"scale": "dorian"}}}],
	})

	acid = polystep.presets.get_preset_by_name("Acid").config
	config = state.random_configs[0]

	assert config.velocity.low == 1
	assert config.velocity.high == acid.velocity.high
	assert config.pitch.scale == polystep.scales.SCALES["dorian"]
	assert config.gate == acid.gate


def test_unknown_preset_raises () -> None:

	"""Unknown preset names are configuration errors."""

	with pytest.raises(polystep.config.ConfigError):
		polystep.config.build_state({"seed": 1, "tracks": [{"preset": "Polka"}]})


@pytest.mark.parametrize("track", [
	{"random": {"pitch": {"scale": "nonexistent"}}},
	{"random": {"gate": {"bogus": 1}}},
	{"random": {"gate": {"mode": "sometimes"}}},
	{"random": {"harmony": {}}},
	{"lfo": {"waveform": "square"}},
	{"arp": {"direction": "sideways"}},
	{"mutate": {"trigger": "never"}},
	{"length": {"drums": 4}},
	{"mutate": "often"},
])
def test_invalid_track_sections_raise (track: dict) -> None:

	"""Bad names and unknown keys in track sections are rejected."""

	with pytest.raises(polystep.config.ConfigError):
		polystep.config.build_state({"seed": 1, "tracks": [track]})


def test_lane_geometry () -> None:

	"""Lengths and dividers can be given per lane or for the whole track."""

	state = polystep.config.build_state({
		"seed": 1,
		"tracks": [
			{"length": {"gate": 12, "pitch": 5}, "dividers": {"mod": 2}, "clock_divider": 3},
			{"length": 8},
		],
	})

	first, second = state.tracks[0], state.tracks[1]

	assert first.gate.length == 12
	assert first.pitch.length == 5
	assert first.velocity.length == 16
	assert first.mod.clock_divider == 2
	assert first.clock_divider == 3
	assert len(first.pitch.steps) == 5
	assert all(second.subtrack(sid).length == 8 for sid in SubtrackId)


def test_arp_and_lfo_are_rendered () -> None:

	"""Enabled arpeggiators and LFOs shape the generated lanes."""

	state = polystep.config.build_state({
		"seed": 1,
		"tracks": [{
			"arp": {"enabled": True, "direction": "up"},
			"lfo": {"enabled": True, "waveform": "saw", "rate": 4},
		}],
	})

	track = state.tracks[0]

	assert [step.note for step in track.pitch.steps][:4] == [60, 63, 65, 67]
	assert list(track.mod.steps[:4]) == pytest.approx([0.0, 0.25, 0.5, 0.75])


def test_mutate_and_transpose () -> None:

	"""Drift and transpose sections land in the track's configs."""

	state = polystep.config.build_state({
		"seed": 1,
		"tracks": [{"mutate": {"trigger": "bars", "bars": 4, "pitch": 0.25}, "transpose": {"semitones": -12, "quantize": True}}],
	})

	assert state.mutate_configs[0] == polystep.models.MutateConfig(trigger="bars", bars=4, pitch=0.25)
	assert state.transpose_configs[0] == polystep.models.TransposeConfig(semitones=-12, quantize=True)


def test_routing () -> None:

	"""Routing entries override individual parameters of an output."""

	state = polystep.config.build_state({"seed": 1, "routing": [{"gate": 1}, {}, {"pitch": 0, "mod": 3}]})

	assert state.routing[0] == polystep.models.OutputRouting(gate=1, pitch=0, velocity=0, mod=0)
	assert state.routing[1] == polystep.models.OutputRouting(gate=1, pitch=1, velocity=1, mod=1)
	assert state.routing[2] == polystep.models.OutputRouting(gate=2, pitch=0, velocity=2, mod=3)


def test_routing_unknown_parameter () -> None:

	"""Routing only knows the four lane names."""

	with pytest.raises(polystep.config.ConfigError):
		polystep.config.build_state({"seed": 1, "routing": [{"cutoff": 1}]})


def test_midi_defaults_enable_every_output () -> None:

	"""Without a midi section every output renders on its own channel."""

	state = polystep.config.build_state({"seed": 1})

	assert all(config.enabled for config in state.midi_configs)
	assert [config.channel for config in state.midi_configs] == [1, 2, 3, 4]


def test_midi_section () -> None:

	"""Listed outputs are enabled unless they opt out; the rest stay off."""

	state = polystep.config.build_state({"seed": 1, "midi": [{"channel": 10}, {"enabled": False}]})

	assert state.midi_configs[0] == polystep.models.MidiOutputConfig(enabled=True, channel=10)
	assert state.midi_configs[1] == polystep.models.MidiOutputConfig(enabled=False, channel=2)
	assert state.midi_configs[2].enabled is False


def test_extra_tracks_warn (caplog: pytest.LogCaptureFixture) -> None:

	"""Tracks beyond the fourth are ignored with a warning."""

	with caplog.at_level(logging.WARNING):
		state = polystep.config.build_state({"seed": 1, "tracks": [{}] * 5})

	assert len(state.tracks) == 4
	assert "ignoring 1" in caplog.text


def test_tracks_must_be_list () -> None:

	"""A non-list tracks section is rejected."""

	with pytest.raises(polystep.config.ConfigError):
		polystep.config.build_state({"tracks": {"preset": "Acid"}})


def test_out_of_range_random_overrides_are_clamped () -> None:

	"""Random overrides from a file are clamped before the track is generated."""

	state = polystep.config.build_state({
		"seed": 2,
		"tracks": [{"random": {
			"pitch": {"low": 120, "high": 140, "scale": "chromatic"},
			"velocity": {"low": 150, "high": 200},
			"gate": {"smart_bars": 8, "smart_density": "build-drop"},
		}}],
	})

	assert state.random_configs[0].pitch.high == 127
	assert state.random_configs[0].gate.smart_bars == 4
	assert state.tracks[0].gate.length == 64
	assert all(step.note <= 127 for step in state.tracks[0].pitch.steps)
	assert all(v == 127 for v in state.tracks[0].velocity.steps)
