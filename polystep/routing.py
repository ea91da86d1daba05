"""Output resolution: routing, transpose and mute.

Each of the four physical outputs picks a source track per parameter. The
gate, gate length and ratchet count come from the gate source; pitch and
slide from the pitch source; velocity and mod from their own sources. Mute
belongs to the output, never to the source track.
"""

import typing

import polystep.constants
import polystep.models
import polystep.scales
import polystep.sequence_utils


def create_default_routing () -> typing.Tuple[polystep.models.OutputRouting, ...]:

	"""One-to-one routing: output ``i`` takes every parameter from track ``i``."""

	return tuple(
		polystep.models.OutputRouting(gate=i, pitch=i, velocity=i, mod=i)
		for i in range(polystep.constants.NUM_OUTPUTS)
	)


def _lookup (items: typing.Optional[typing.Sequence[typing.Any]], index: int) -> typing.Any:

	if items is None or index < 0 or index >= len(items):
		return None

	return items[index]


def _transpose (
	note: int,
	config: typing.Optional[polystep.models.TransposeConfig],
	random_config: typing.Optional[polystep.models.RandomConfig]
) -> int:

	if config is None:
		return note

	note = polystep.sequence_utils.clamp(note + config.semitones, polystep.constants.MIN_NOTE, polystep.constants.MAX_NOTE)

	if config.quantize and random_config is not None:
		note = polystep.scales.snap_to_scale(note, random_config.pitch.root, random_config.pitch.scale)
		note = polystep.sequence_utils.clamp(note, polystep.constants.MIN_NOTE, polystep.constants.MAX_NOTE)

	return note


def resolve_outputs (
	tracks: typing.Sequence[polystep.models.Track],
	routing: typing.Sequence[polystep.models.OutputRouting],
	mutes: typing.Sequence[polystep.models.MuteTrack],
	transpose_configs: typing.Optional[typing.Sequence[polystep.models.TransposeConfig]] = None,
	random_configs: typing.Optional[typing.Sequence[polystep.models.RandomConfig]] = None
) -> typing.List[polystep.models.NoteEvent]:

	"""Build one :class:`~polystep.models.NoteEvent` per output from the current step of each source lane.

	Parameters:
		tracks: Tracks with their playheads already set for this tick.
		routing: Per-output source selection.
		mutes: Per-output mute lanes (indexed by output, not by track).
		transpose_configs: Optional per-track transpose, applied via the
			pitch source track.
		random_configs: Optional per-track random configs; needed only for
			transposes with ``quantize`` set, to find the scale to snap to.

	Missing routing entries or source tracks yield silent, zero-valued fields.
	"""

	events = []

	for output in range(polystep.constants.NUM_OUTPUTS):

		route = _lookup(routing, output)

		if route is None:
			events.append(polystep.models.NoteEvent(output=output))
			continue

		gate_track = _lookup(tracks, route.gate)
		pitch_track = _lookup(tracks, route.pitch)
		velocity_track = _lookup(tracks, route.velocity)
		mod_track = _lookup(tracks, route.mod)

		gate_step = gate_track.gate.current if gate_track is not None else None
		pitch_step = pitch_track.pitch.current if pitch_track is not None else None

		gate = bool(gate_step.on) if gate_step is not None else False
		pitch = pitch_step.note if pitch_step is not None else 0

		if pitch_step is not None:
			pitch = _transpose(pitch, _lookup(transpose_configs, route.pitch), _lookup(random_configs, route.pitch))

		mute = _lookup(mutes, output)

		if mute is not None and mute.current:
			gate = False

		events.append(polystep.models.NoteEvent(
			output = output,
			gate = gate,
			pitch = pitch,
			velocity = velocity_track.velocity.current if velocity_track is not None else 0,
			mod = mod_track.mod.current if mod_track is not None else 0.0,
			gate_length = gate_step.length if gate_step is not None else 0.0,
			ratchet_count = gate_step.ratchet if gate_step is not None else 1,
			slide = pitch_step.slide if pitch_step is not None else 0.0,
		))

	return events
