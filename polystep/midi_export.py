"""Render a session to a standard MIDI file.

Each master tick is a 16th note. The events of a tick become note on/off
pairs (one per ratchet sub-trigger) and a mod-wheel CC on the output's MIDI
channel. Every enabled output gets its own track in a type-1 file.
"""

import logging
import typing

import mido

import polystep.models
import polystep.sequence_utils
import polystep.sequencer


logger = logging.getLogger(__name__)

TICKS_PER_BEAT = 480
STEPS_PER_BEAT = 4
STEP_TICKS = TICKS_PER_BEAT // STEPS_PER_BEAT

MOD_WHEEL_CC = 1

# Messages sharing a timestamp are ordered releases first so a repeated note
# is not cut off by its own previous note-off.
_ORDER = {"note_off": 0, "control_change": 1, "note_on": 2}


def events_to_messages (
	events: typing.Sequence[polystep.models.NoteEvent],
	configs: typing.Sequence[polystep.models.MidiOutputConfig],
	step_ticks: int = STEP_TICKS
) -> typing.List[typing.Tuple[int, int, mido.Message]]:

	"""Turn one tick's events into timed MIDI messages.

	Parameters:
		events: Output events from :func:`polystep.sequencer.tick`.
		configs: Per-output MIDI configs; outputs without an enabled config are skipped.
		step_ticks: Length of one step in MIDI ticks.

	Returns:
		``(output, offset, message)`` triples, where ``offset`` is in MIDI
		ticks from the start of the step and may reach into later steps.

	A step with ``ratchet_count`` N is divided into N equal parts; each
	sub-note holds ``gate_length`` of its part. Otherwise a single note holds
	``gate_length`` of the whole step.
	"""

	messages: typing.List[typing.Tuple[int, int, mido.Message]] = []

	for event in events:

		if event.output < 0 or event.output >= len(configs):
			continue

		config = configs[event.output]

		if not config.enabled or not event.gate:
			continue

		channel = polystep.sequence_utils.clamp(config.channel - 1, 0, 15)
		velocity = polystep.sequence_utils.clamp(event.velocity, 0, 127)
		mod = polystep.sequence_utils.clamp(polystep.sequence_utils.round_half_up(event.mod * 127), 0, 127)
		ratchets = max(1, event.ratchet_count)

		messages.append((event.output, 0, mido.Message('control_change', channel=channel, control=MOD_WHEEL_CC, value=mod)))

		sub_ticks = step_ticks / ratchets
		hold = max(1, polystep.sequence_utils.round_half_up(sub_ticks * event.gate_length))

		for r in range(ratchets):
			on_time = polystep.sequence_utils.round_half_up(r * sub_ticks)
			messages.append((event.output, on_time, mido.Message('note_on', channel=channel, note=event.pitch, velocity=velocity)))
			messages.append((event.output, on_time + hold, mido.Message('note_off', channel=channel, note=event.pitch, velocity=0)))

	return messages


def render (
	state: polystep.models.SequencerState,
	ticks: int,
	filename: str
) -> polystep.models.SequencerState:

	"""Play ``ticks`` master ticks from ``state`` and save the result as a MIDI file.

	Returns the state after the last tick so that rendering can continue.

	Example:
		```python
		state = polystep.config.build_state({"seed": 7})
		polystep.midi_export.render(state, 16 * 8, "eight_bars.mid")
		```
	"""

	scheduled: typing.Dict[int, typing.List[typing.Tuple[int, mido.Message]]] = {}

	for step in range(ticks):

		result = polystep.sequencer.tick(state)
		state = result.state
		start = step * STEP_TICKS

		for output, offset, message in events_to_messages(result.events, state.midi_configs):
			scheduled.setdefault(output, []).append((start + offset, message))

	logger.info(f"Saving MIDI render ({ticks} steps, {sum(len(m) for m in scheduled.values())} messages) to {filename}...")

	mid = mido.MidiFile(type=1)
	mid.ticks_per_beat = TICKS_PER_BEAT

	tempo_track = mido.MidiTrack()
	tempo_track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(state.transport.bpm), time=0))
	tempo_track.append(mido.MetaMessage('time_signature', numerator=4, denominator=4, time=0))
	mid.tracks.append(tempo_track)

	for output in sorted(scheduled):

		track = mido.MidiTrack()
		track.append(mido.MetaMessage('track_name', name=f"Output {output + 1}", time=0))

		last_tick = 0

		for when, message in sorted(scheduled[output], key=lambda item: (item[0], _ORDER[item[1].type])):
			track.append(message.copy(time=when - last_tick))
			last_tick = when

		mid.tracks.append(track)

	try:
		mid.save(filename)
		logger.info(f"Saved {filename}")
	except OSError as e:
		logger.error(f"Failed to save MIDI render: {e}")
		raise

	return state
