import pathlib

import mido
import pytest

import polystep.midi_export
import polystep.models
import polystep.sequencer


ENABLED = [polystep.models.MidiOutputConfig(enabled=True, channel=i + 1) for i in range(4)]


def _timeline (messages: list) -> list:

	return [(offset, message.type) for _, offset, message in messages]


# ---------------------------------------------------------------------------
# events_to_messages
# ---------------------------------------------------------------------------

def test_single_note () -> None:

	"""A plain gate becomes a mod CC and one note held for gate_length of the step."""

	event = polystep.models.NoteEvent(output=0, gate=True, pitch=64, velocity=90, mod=0.5, gate_length=0.5)
	messages = polystep.midi_export.events_to_messages([event], ENABLED, step_ticks=120)

	assert _timeline(messages) == [(0, "control_change"), (0, "note_on"), (60, "note_off")]

	cc = messages[0][2]
	note_on = messages[1][2]

	assert cc.control == 1
	assert cc.value == 64
	assert note_on.note == 64
	assert note_on.velocity == 90
	assert note_on.channel == 0


def test_ratchets_subdivide_step () -> None:

	"""Three ratchets give three notes, each holding half of its third of the step."""

	event = polystep.models.NoteEvent(output=1, gate=True, pitch=60, velocity=100, gate_length=0.5, ratchet_count=3)
	messages = polystep.midi_export.events_to_messages([event], ENABLED, step_ticks=120)

	notes = [(offset, message.type) for _, offset, message in messages if message.type != "control_change"]

	assert notes == [(0, "note_on"), (20, "note_off"), (40, "note_on"), (60, "note_off"), (80, "note_on"), (100, "note_off")]
	assert all(message.channel == 1 for _, _, message in messages)


def test_silent_and_disabled_outputs_skipped () -> None:

	"""Closed gates and disabled outputs produce nothing."""

	events = [
		polystep.models.NoteEvent(output=0, gate=False, pitch=60, velocity=100, gate_length=0.5),
		polystep.models.NoteEvent(output=1, gate=True, pitch=60, velocity=100, gate_length=0.5),
	]
	configs = [ENABLED[0], polystep.models.MidiOutputConfig(enabled=False, channel=2)]

	assert polystep.midi_export.events_to_messages(events, configs) == []


def test_channel_and_mod_clamped () -> None:

	"""Channels map from 1-based config to 0-based MIDI; mod is scaled to 0-127."""

	event = polystep.models.NoteEvent(output=0, gate=True, pitch=60, velocity=100, mod=1.0, gate_length=1.0)
	messages = polystep.midi_export.events_to_messages([event], [polystep.models.MidiOutputConfig(enabled=True, channel=10)])

	assert all(message.channel == 9 for _, _, message in messages)
	assert messages[0][2].value == 127
	assert messages[-1][1] == polystep.midi_export.STEP_TICKS


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------

def test_render_writes_file (tmp_path: pathlib.Path) -> None:

	"""Rendering a bar writes a type-1 file with tempo and one note per open gate."""

	state = polystep.sequencer.create_sequencer()
	state = polystep.sequencer.set_gate_on(state, 0, 0, True)
	state = polystep.sequencer.set_gate_on(state, 0, 8, True)
	state = polystep.sequencer.set_midi_config(state, 0, polystep.models.MidiOutputConfig(enabled=True, channel=3))

	filename = str(tmp_path / "bar.mid")
	final = polystep.midi_export.render(state, 16, filename)

	assert final.transport.master_tick == 16

	mid = mido.MidiFile(filename)

	assert mid.type == 1
	assert mid.ticks_per_beat == 480
	assert len(mid.tracks) == 2

	tempo = [m for m in mid.tracks[0] if m.type == "set_tempo"]

	assert tempo[0].tempo == mido.bpm2tempo(135)

	absolute = 0
	note_ons = []

	for message in mid.tracks[1]:
		absolute += message.time
		if message.type == "note_on":
			note_ons.append((absolute, message.channel, message.note))

	assert note_ons == [(0, 2, 60), (8 * 120, 2, 60)]


def test_render_save_failure_raises (tmp_path: pathlib.Path) -> None:

	"""A file that cannot be written is reported and the error propagates."""

	state = polystep.sequencer.create_sequencer()

	with pytest.raises(OSError):
		polystep.midi_export.render(state, 4, str(tmp_path / "missing" / "out.mid"))
