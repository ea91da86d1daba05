"""
Polystep: Polymeter Study

Four tracks built from short loops of different lengths. Every lane runs
on its own cycle, so the phrase only repeats once all of them line up
again.

How it works
────────────
Track 1 plays a 16-step euclidean gate against a 7-step melody and a
5-step velocity accent, so the same note never lands on the same beat
with the same accent until 16 x 7 x 5 = 560 steps have passed (35 bars).
Track 2 runs at half speed with a 3-step arpeggio. Output 3 borrows its
gates from track 1 through the routing table but takes pitch from
track 2, which is transposed up an octave wherever it is heard.
Drift nudges track 1's melody on every second wrap of its pitch lane.

Lane overview
─────────────
  Track │ Gate │ Pitch        │ Velocity │ Divider │ Notes
  ──────┼──────┼──────────────┼──────────┼─────────┼──────────────────────
  1     │ 16   │ 7            │ 5        │ 1       │ pitch drifts each loop
  2     │ 16   │ 3 (arp, up)  │ 16       │ 2       │ half-speed arpeggio
  out 3 │ ← 1  │ ← 2 (+12)    │ ← 1      │         │ routed, no own track

How to run
──────────
  python examples/polymeter.py

Writes polymeter.mid (32 bars) in the current directory.
"""

import logging

import polystep.midi_export
import polystep.models
import polystep.sequencer


logging.basicConfig(level=logging.INFO)

SubtrackId = polystep.models.SubtrackId

BARS = 32
SEED = 11


def build () -> polystep.models.SequencerState:

	"""Set up the session."""

	state = polystep.sequencer.create_sequencer()
	state = polystep.sequencer.set_bpm(state, 118)

	# Track 1: euclidean gates, short melody, accent loop.
	state = polystep.sequencer.apply_preset(state, 0, "Bassline")
	state = polystep.sequencer.set_subtrack_length(state, 0, SubtrackId.PITCH, 7)
	state = polystep.sequencer.set_subtrack_length(state, 0, SubtrackId.VELOCITY, 5)
	state = polystep.sequencer.randomize_track_pattern(state, 0, seed=SEED)
	state = polystep.sequencer.set_mutate_config(state, 0, polystep.models.MutateConfig(trigger="loop", bars=2, pitch=0.3))

	# Track 2: half-speed arpeggio.
	state = polystep.sequencer.apply_preset(state, 1, "Hypnotic")
	state = polystep.sequencer.set_track_clock_divider(state, 1, 2)
	state = polystep.sequencer.set_subtrack_length(state, 1, SubtrackId.PITCH, 3)
	state = polystep.sequencer.set_arp_config(state, 1, polystep.models.ArpConfig(enabled=True, direction="up", octave_range=1))
	state = polystep.sequencer.randomize_track_pattern(state, 1, seed=SEED + 1)
	state = polystep.sequencer.randomize_pitch_pattern(state, 1, seed=SEED + 1)

	# Output 3: gates and velocity from track 1, pitch from track 2.
	state = polystep.sequencer.set_output_source(state, 2, SubtrackId.GATE, 0)
	state = polystep.sequencer.set_output_source(state, 2, SubtrackId.PITCH, 1)
	state = polystep.sequencer.set_output_source(state, 2, SubtrackId.VELOCITY, 0)
	state = polystep.sequencer.set_transpose_config(state, 1, polystep.models.TransposeConfig(semitones=12, quantize=True))

	for output in range(3):
		state = polystep.sequencer.set_midi_config(state, output, polystep.models.MidiOutputConfig(enabled=True, channel=output + 1))

	return state


if __name__ == "__main__":

	polystep.midi_export.render(build(), BARS * 16, "polymeter.mid")
