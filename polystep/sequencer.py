"""The sequencer core: state creation, the tick, and every editing command.

Everything here is a pure function from a :class:`~polystep.models.SequencerState`
(plus arguments) to a new state. The caller owns "the current state" and
threads it through serially; nothing is modified in place. Setters clamp
their inputs instead of rejecting them, and commands aimed at a track, output
or preset index that does not exist return the input state unchanged.
"""

import dataclasses
import logging
import typing

import polystep.arpeggiator
import polystep.clock
import polystep.constants
import polystep.lfo
import polystep.models
import polystep.mutator
import polystep.presets
import polystep.randomizer
import polystep.routing
import polystep.rng
import polystep.sequence_utils
import polystep.smart_gate


logger = logging.getLogger(__name__)

T = typing.TypeVar("T")

SubtrackId = polystep.models.SubtrackId
State = polystep.models.SequencerState

DEFAULT_GATE_STEP = polystep.models.GateStep()
DEFAULT_PITCH_STEP = polystep.models.PitchStep()

# Padding values used when a lane grows.
SUBTRACK_DEFAULTS: typing.Dict[SubtrackId, typing.Any] = {
	SubtrackId.GATE: DEFAULT_GATE_STEP,
	SubtrackId.PITCH: DEFAULT_PITCH_STEP,
	SubtrackId.VELOCITY: polystep.constants.DEFAULT_VELOCITY,
	SubtrackId.MOD: 0.0,
}


@dataclasses.dataclass(frozen=True)
class TickResult:

	"""
	The outcome of one master tick: the advanced state and the events just played.
	"""

	state: polystep.models.SequencerState
	events: typing.List[polystep.models.NoteEvent]


# ─── Construction ─────────────────────────────────────────────────────────────


def _create_subtrack (value: T, length: int = polystep.constants.DEFAULT_LENGTH) -> polystep.models.Subtrack[T]:

	return polystep.models.Subtrack(steps=(value,) * length, length=length)


def _create_track (index: int) -> polystep.models.Track:

	return polystep.models.Track(
		id = str(index),
		name = f"Track {index + 1}",
		gate = _create_subtrack(DEFAULT_GATE_STEP),
		pitch = _create_subtrack(DEFAULT_PITCH_STEP),
		velocity = _create_subtrack(polystep.constants.DEFAULT_VELOCITY),
		mod = _create_subtrack(0.0),
	)


def create_sequencer () -> polystep.models.SequencerState:

	"""
	Create the session state: four silent 16-step tracks, one-to-one routing,
	no mutes, transport stopped at tick 0.
	"""

	count = polystep.constants.NUM_TRACKS

	return polystep.models.SequencerState(
		tracks = tuple(_create_track(i) for i in range(count)),
		routing = polystep.routing.create_default_routing(),
		mute_patterns = tuple(_create_subtrack(False) for _ in range(polystep.constants.NUM_OUTPUTS)),
		transport = polystep.models.Transport(),
		random_configs = (polystep.models.RandomConfig(),) * count,
		mutate_configs = (polystep.models.MutateConfig(),) * count,
		lfo_configs = (polystep.models.LfoConfig(),) * count,
		arp_configs = (polystep.models.ArpConfig(),) * count,
		transpose_configs = (polystep.models.TransposeConfig(),) * count,
		midi_configs = tuple(polystep.models.MidiOutputConfig(channel=i + 1) for i in range(polystep.constants.NUM_OUTPUTS)),
	)


# ─── Tick ─────────────────────────────────────────────────────────────────────


def _lane_at (sub: polystep.models.Subtrack[T], master_tick: int, track_divider: int) -> polystep.models.Subtrack[T]:

	step = polystep.clock.get_effective_step(master_tick, track_divider, sub.clock_divider, sub.length)

	if step == sub.current_step:
		return sub

	return dataclasses.replace(sub, current_step=step)


def _track_at (track: polystep.models.Track, master_tick: int) -> polystep.models.Track:

	"""Move every playhead of a track to ``master_tick``."""

	return dataclasses.replace(
		track,
		gate = _lane_at(track.gate, master_tick, track.clock_divider),
		pitch = _lane_at(track.pitch, master_tick, track.clock_divider),
		velocity = _lane_at(track.velocity, master_tick, track.clock_divider),
		mod = _lane_at(track.mod, master_tick, track.clock_divider),
	)


def _drift (
	track: polystep.models.Track,
	random_config: polystep.models.RandomConfig,
	mutate_config: polystep.models.MutateConfig,
	master_tick: int
) -> polystep.models.Track:

	"""Apply drift if this tick is a trigger point for the track (or any of its lanes)."""

	if not polystep.mutator.is_mutate_active(mutate_config):
		return track

	if mutate_config.trigger == "bars":

		if polystep.clock.bar_boundary(master_tick, mutate_config.bars):
			return polystep.mutator.mutate_track(track, random_config, mutate_config, master_tick)

		return track

	def rate_if_looped (sid: SubtrackId) -> float:

		lane = track.subtrack(sid)
		looped = polystep.clock.looped_on_nth(master_tick, track.clock_divider, lane.clock_divider, lane.length, mutate_config.bars)

		return mutate_config.rate(sid) if looped else 0.0

	loop_config = dataclasses.replace(
		mutate_config,
		gate = rate_if_looped(SubtrackId.GATE),
		pitch = rate_if_looped(SubtrackId.PITCH),
		velocity = rate_if_looped(SubtrackId.VELOCITY),
		mod = rate_if_looped(SubtrackId.MOD),
	)

	if not polystep.mutator.is_mutate_active(loop_config):
		return track

	return polystep.mutator.mutate_track(track, random_config, loop_config, master_tick)


def tick (state: polystep.models.SequencerState) -> TickResult:

	"""Advance the sequencer by one master tick.

	Events are resolved from the playheads at the current ``master_tick``.
	Drift is then applied where a trigger falls on this tick, and the
	returned state has every playhead (tracks and mutes) moved on to
	``master_tick + 1``, so it already points at the next step to play.

	Example:
		```python
		state = polystep.sequencer.create_sequencer()
		result = polystep.sequencer.tick(state)
		state = result.state
		for event in result.events:
			...
		```
	"""

	master_tick = state.transport.master_tick
	next_tick = master_tick + 1

	current_tracks = [_track_at(track, master_tick) for track in state.tracks]
	current_mutes = [_lane_at(mute, master_tick, 1) for mute in state.mute_patterns]

	events = polystep.routing.resolve_outputs(
		current_tracks,
		state.routing,
		current_mutes,
		state.transpose_configs,
		state.random_configs,
	)

	drifted = [
		_drift(track, state.random_configs[i], state.mutate_configs[i], master_tick)
		for i, track in enumerate(state.tracks)
	]

	next_state = dataclasses.replace(
		state,
		tracks = tuple(_track_at(track, next_tick) for track in drifted),
		mute_patterns = tuple(_lane_at(mute, next_tick, 1) for mute in state.mute_patterns),
		transport = dataclasses.replace(state.transport, master_tick=next_tick),
	)

	return TickResult(state=next_state, events=events)


# ─── Structural helpers ───────────────────────────────────────────────────────


def _valid_index (items: typing.Sequence[typing.Any], index: int) -> bool:

	return 0 <= index < len(items)


def _update_track (
	state: polystep.models.SequencerState,
	track_index: int,
	update: typing.Callable[[polystep.models.Track], polystep.models.Track]
) -> polystep.models.SequencerState:

	if not _valid_index(state.tracks, track_index):
		return state

	track = update(state.tracks[track_index])

	return dataclasses.replace(state, tracks=polystep.models.replace_at(state.tracks, track_index, track))


def _update_lane (
	state: polystep.models.SequencerState,
	track_index: int,
	sid: SubtrackId,
	update: typing.Callable[[polystep.models.Subtrack[typing.Any]], polystep.models.Subtrack[typing.Any]]
) -> polystep.models.SequencerState:

	return _update_track(state, track_index, lambda track: track.with_subtrack(sid, update(track.subtrack(sid))))


def _update_step (
	sub: polystep.models.Subtrack[T],
	step_index: int,
	update: typing.Callable[[T], T]
) -> polystep.models.Subtrack[T]:

	if not _valid_index(sub.steps, step_index):
		return sub

	return dataclasses.replace(sub, steps=polystep.models.replace_at(sub.steps, step_index, update(sub.steps[step_index])))


def _update_config (
	state: polystep.models.SequencerState,
	field: str,
	index: int,
	value: typing.Any
) -> polystep.models.SequencerState:

	"""Replace one entry of a per-track (or per-output) config tuple."""

	configs = getattr(state, field)

	if not _valid_index(configs, index):
		return state

	return dataclasses.replace(state, **{field: polystep.models.replace_at(configs, index, value)})


def _resize (steps: typing.Tuple[T, ...], length: int, default: T) -> typing.Tuple[T, ...]:

	if length <= len(steps):
		return steps[:length]

	return steps + (default,) * (length - len(steps))


def _clamp_length (length: int) -> int:

	return polystep.sequence_utils.clamp(int(length), polystep.constants.MIN_LENGTH, polystep.constants.MAX_LENGTH)


def _clamp_divider (divider: int) -> int:

	return polystep.sequence_utils.clamp(int(divider), polystep.constants.MIN_DIVIDER, polystep.constants.MAX_DIVIDER)


def _clamp_source (source: int) -> int:

	return polystep.sequence_utils.clamp(int(source), 0, polystep.constants.NUM_TRACKS - 1)


# ─── Step editing ─────────────────────────────────────────────────────────────


def set_step (state: State, track_index: int, sid: SubtrackId, step_index: int, value: float) -> State:

	"""
	Set a plain value in the velocity (0-127) or mod (0-1) lane.
	"""

	if sid is SubtrackId.VELOCITY:
		clamped: typing.Any = polystep.sequence_utils.clamp(int(value), polystep.constants.MIN_VELOCITY, polystep.constants.MAX_VELOCITY)

	elif sid is SubtrackId.MOD:
		clamped = polystep.sequence_utils.clamp(float(value), 0.0, 1.0)

	else:
		raise ValueError(f"set_step only edits velocity or mod lanes, not {sid.value!r}")

	return _update_lane(state, track_index, sid, lambda sub: _update_step(sub, step_index, lambda _: clamped))


def _edit_gate (state: State, track_index: int, step_index: int, **changes: typing.Any) -> State:

	return _update_lane(
		state, track_index, SubtrackId.GATE,
		lambda sub: _update_step(sub, step_index, lambda step: dataclasses.replace(step, **changes))
	)


def _edit_pitch (state: State, track_index: int, step_index: int, **changes: typing.Any) -> State:

	return _update_lane(
		state, track_index, SubtrackId.PITCH,
		lambda sub: _update_step(sub, step_index, lambda step: dataclasses.replace(step, **changes))
	)


def set_gate_on (state: State, track_index: int, step_index: int, value: bool) -> State:

	"""Switch a gate step on or off."""

	return _edit_gate(state, track_index, step_index, on=bool(value))


def set_gate_length (state: State, track_index: int, step_index: int, value: float) -> State:

	"""Set a gate step's open time (0.05-1.0 of the step)."""

	length = polystep.sequence_utils.clamp(float(value), polystep.constants.MIN_GATE_LENGTH, polystep.constants.MAX_GATE_LENGTH)

	return _edit_gate(state, track_index, step_index, length=length)


def set_gate_ratchet (state: State, track_index: int, step_index: int, value: int) -> State:

	"""Set a gate step's ratchet count (1-4)."""

	ratchet = polystep.sequence_utils.clamp(int(value), polystep.constants.MIN_RATCHET, polystep.constants.MAX_RATCHET)

	return _edit_gate(state, track_index, step_index, ratchet=ratchet)


def set_pitch_note (state: State, track_index: int, step_index: int, value: int) -> State:

	"""Set a pitch step's note (0-127)."""

	note = polystep.sequence_utils.clamp(int(value), polystep.constants.MIN_NOTE, polystep.constants.MAX_NOTE)

	return _edit_pitch(state, track_index, step_index, note=note)


def set_slide (state: State, track_index: int, step_index: int, value: float) -> State:

	"""Set a pitch step's slide time in seconds (0-0.5)."""

	slide = polystep.sequence_utils.clamp(float(value), 0.0, polystep.constants.MAX_SLIDE)

	return _edit_pitch(state, track_index, step_index, slide=slide)


# ─── Routing and mutes ────────────────────────────────────────────────────────


def set_routing (state: State, routing: typing.Sequence[polystep.models.OutputRouting]) -> State:

	"""Replace the whole routing table (source indices are clamped to 0-3)."""

	clamped = tuple(
		polystep.models.OutputRouting(
			gate = _clamp_source(route.gate),
			pitch = _clamp_source(route.pitch),
			velocity = _clamp_source(route.velocity),
			mod = _clamp_source(route.mod),
		)
		for route in routing
	)

	return dataclasses.replace(state, routing=clamped)


def set_output_source (state: State, output_index: int, sid: SubtrackId, source_track: int) -> State:

	"""
	Choose which track feeds one parameter of one output.
	"""

	if not _valid_index(state.routing, output_index):
		return state

	route = dataclasses.replace(state.routing[output_index], **{sid.value: _clamp_source(source_track)})

	return dataclasses.replace(state, routing=polystep.models.replace_at(state.routing, output_index, route))


def _update_mute (
	state: State,
	output_index: int,
	update: typing.Callable[[polystep.models.MuteTrack], polystep.models.MuteTrack]
) -> State:

	if not _valid_index(state.mute_patterns, output_index):
		return state

	mute = update(state.mute_patterns[output_index])

	return dataclasses.replace(state, mute_patterns=polystep.models.replace_at(state.mute_patterns, output_index, mute))


def set_mute_pattern (state: State, output_index: int, mute: polystep.models.MuteTrack) -> State:

	"""Replace an output's mute lane."""

	return _update_mute(state, output_index, lambda _: mute)


def set_mute_step (state: State, output_index: int, step_index: int, muted: bool) -> State:

	"""Mute or unmute one step of an output's mute lane."""

	return _update_mute(state, output_index, lambda mute: _update_step(mute, step_index, lambda _: bool(muted)))


def set_mute_length (state: State, output_index: int, length: int) -> State:

	"""Resize a mute lane (1-64); new steps are unmuted."""

	length = _clamp_length(length)

	return _update_mute(
		state, output_index,
		lambda mute: dataclasses.replace(mute, length=length, steps=_resize(mute.steps, length, False), current_step=mute.current_step % length)
	)


def set_mute_clock_divider (state: State, output_index: int, divider: int) -> State:

	"""Set a mute lane's clock divider (1-32)."""

	divider = _clamp_divider(divider)

	return _update_mute(state, output_index, lambda mute: dataclasses.replace(mute, clock_divider=divider))


# ─── Geometry ─────────────────────────────────────────────────────────────────


def set_subtrack_length (state: State, track_index: int, sid: SubtrackId, length: int) -> State:

	"""
	Resize one lane (1-64). Growing pads with the lane's default step; shrinking truncates.
	"""

	length = _clamp_length(length)
	default = SUBTRACK_DEFAULTS[sid]

	return _update_lane(
		state, track_index, sid,
		lambda sub: dataclasses.replace(sub, length=length, steps=_resize(sub.steps, length, default), current_step=sub.current_step % length)
	)


def set_subtrack_clock_divider (state: State, track_index: int, sid: SubtrackId, divider: int) -> State:

	"""Set one lane's own clock divider (1-32)."""

	divider = _clamp_divider(divider)

	return _update_lane(state, track_index, sid, lambda sub: dataclasses.replace(sub, clock_divider=divider))


def set_track_clock_divider (state: State, track_index: int, divider: int) -> State:

	"""Set the track-level divider (1-32), which multiplies every lane's divider."""

	divider = _clamp_divider(divider)

	return _update_track(state, track_index, lambda track: dataclasses.replace(track, clock_divider=divider))


def reset_subtrack_playhead (state: State, track_index: int, sid: SubtrackId) -> State:

	"""Move one lane's playhead back to step 0."""

	return _update_lane(state, track_index, sid, lambda sub: dataclasses.replace(sub, current_step=0))


def reset_track_playheads (state: State, track_index: int) -> State:

	"""Move every playhead of a track back to step 0."""

	def reset (track: polystep.models.Track) -> polystep.models.Track:
		for sid in SubtrackId:
			track = track.with_subtrack(sid, dataclasses.replace(track.subtrack(sid), current_step=0))
		return track

	return _update_track(state, track_index, reset)


def reset_all_playheads (state: State) -> State:

	"""Rewind the transport to tick 0 along with every track and mute playhead."""

	for index in range(len(state.tracks)):
		state = reset_track_playheads(state, index)

	return dataclasses.replace(
		state,
		mute_patterns = tuple(dataclasses.replace(mute, current_step=0) for mute in state.mute_patterns),
		transport = dataclasses.replace(state.transport, master_tick=0),
	)


# ─── Transport and configs ────────────────────────────────────────────────────


def set_bpm (state: State, bpm: float) -> State:

	"""Set the session tempo (20-300 BPM)."""

	bpm = polystep.sequence_utils.clamp(float(bpm), float(polystep.constants.MIN_BPM), float(polystep.constants.MAX_BPM))

	return dataclasses.replace(state, transport=dataclasses.replace(state.transport, bpm=bpm))


def set_playing (state: State, playing: bool) -> State:

	"""Record whether the host transport is running."""

	return dataclasses.replace(state, transport=dataclasses.replace(state.transport, playing=bool(playing)))


def set_random_config (state: State, track_index: int, config: polystep.models.RandomConfig) -> State:

	"""Replace a track's random config.

	Notes and velocities are clamped to 0-127, mod values, fills and
	probabilities to 0-1, ratchets to 1-4 and smart gate phrases to the
	number of bars that fit in one lane.
	"""

	clamp = polystep.sequence_utils.clamp
	constants = polystep.constants

	clamped = dataclasses.replace(
		config,
		pitch = dataclasses.replace(
			config.pitch,
			low = clamp(int(config.pitch.low), constants.MIN_NOTE, constants.MAX_NOTE),
			high = clamp(int(config.pitch.high), constants.MIN_NOTE, constants.MAX_NOTE),
			root = clamp(int(config.pitch.root), constants.MIN_NOTE, constants.MAX_NOTE),
			max_notes = max(0, int(config.pitch.max_notes)),
		),
		gate = dataclasses.replace(
			config.gate,
			fill_min = clamp(float(config.gate.fill_min), 0.0, 1.0),
			fill_max = clamp(float(config.gate.fill_max), 0.0, 1.0),
			smart_bars = clamp(int(config.gate.smart_bars), 1, constants.MAX_SMART_BARS),
		),
		velocity = dataclasses.replace(
			config.velocity,
			low = clamp(int(config.velocity.low), constants.MIN_VELOCITY, constants.MAX_VELOCITY),
			high = clamp(int(config.velocity.high), constants.MIN_VELOCITY, constants.MAX_VELOCITY),
		),
		gate_length = dataclasses.replace(
			config.gate_length,
			min = clamp(float(config.gate_length.min), constants.MIN_GATE_LENGTH, constants.MAX_GATE_LENGTH),
			max = clamp(float(config.gate_length.max), constants.MIN_GATE_LENGTH, constants.MAX_GATE_LENGTH),
		),
		ratchet = dataclasses.replace(
			config.ratchet,
			max_ratchet = clamp(int(config.ratchet.max_ratchet), constants.MIN_RATCHET, constants.MAX_RATCHET),
			probability = clamp(float(config.ratchet.probability), 0.0, 1.0),
		),
		slide = dataclasses.replace(config.slide, probability=clamp(float(config.slide.probability), 0.0, 1.0)),
		mod = dataclasses.replace(
			config.mod,
			low = clamp(float(config.mod.low), 0.0, 1.0),
			high = clamp(float(config.mod.high), 0.0, 1.0),
		),
	)

	return _update_config(state, "random_configs", track_index, clamped)


def set_mutate_config (state: State, track_index: int, config: polystep.models.MutateConfig) -> State:

	"""Replace a track's drift config. Rates are clamped to 0-1 and bars to at least 1."""

	clamped = dataclasses.replace(
		config,
		bars = max(1, int(config.bars)),
		gate = polystep.sequence_utils.clamp(config.gate, 0.0, 1.0),
		pitch = polystep.sequence_utils.clamp(config.pitch, 0.0, 1.0),
		velocity = polystep.sequence_utils.clamp(config.velocity, 0.0, 1.0),
		mod = polystep.sequence_utils.clamp(config.mod, 0.0, 1.0),
	)

	return _update_config(state, "mutate_configs", track_index, clamped)


def set_lfo_config (state: State, track_index: int, config: polystep.models.LfoConfig) -> State:

	"""Replace a track's LFO config (rate 1-64, depth and offset 0-1)."""

	clamped = dataclasses.replace(
		config,
		rate = polystep.sequence_utils.clamp(int(config.rate), polystep.constants.MIN_LFO_RATE, polystep.constants.MAX_LFO_RATE),
		depth = polystep.sequence_utils.clamp(config.depth, 0.0, 1.0),
		offset = polystep.sequence_utils.clamp(config.offset, 0.0, 1.0),
	)

	return _update_config(state, "lfo_configs", track_index, clamped)


def set_arp_config (state: State, track_index: int, config: polystep.models.ArpConfig) -> State:

	"""Replace a track's arpeggiator config (octave range 1-4)."""

	octaves = polystep.sequence_utils.clamp(int(config.octave_range), polystep.constants.MIN_OCTAVE_RANGE, polystep.constants.MAX_OCTAVE_RANGE)

	return _update_config(state, "arp_configs", track_index, dataclasses.replace(config, octave_range=octaves))


def set_transpose_config (state: State, track_index: int, config: polystep.models.TransposeConfig) -> State:

	"""Replace a track's transpose (-48 to +48 semitones)."""

	semitones = polystep.sequence_utils.clamp(int(config.semitones), polystep.constants.MIN_TRANSPOSE, polystep.constants.MAX_TRANSPOSE)

	return _update_config(state, "transpose_configs", track_index, dataclasses.replace(config, semitones=semitones))


def set_midi_config (state: State, output_index: int, config: polystep.models.MidiOutputConfig) -> State:

	"""Replace an output's MIDI config (channel 1-16)."""

	channel = polystep.sequence_utils.clamp(int(config.channel), 1, 16)

	return _update_config(state, "midi_configs", output_index, dataclasses.replace(config, channel=channel))


# ─── Presets ──────────────────────────────────────────────────────────────────


def save_user_preset (state: State, name: str, config: polystep.models.RandomConfig) -> State:

	"""Append a named user preset."""

	logger.debug(f"Saving user preset {name!r}")

	return dataclasses.replace(state, user_presets=state.user_presets + (polystep.models.UserPreset(name=name, config=config),))


def delete_user_preset (state: State, index: int) -> State:

	"""Remove a user preset by position; out-of-range positions leave the state untouched."""

	if not _valid_index(state.user_presets, index):
		return state

	return dataclasses.replace(state, user_presets=state.user_presets[:index] + state.user_presets[index + 1:])


def all_presets (state: State) -> typing.List[polystep.models.UserPreset]:

	"""Factory presets followed by the user's own."""

	return list(polystep.presets.PRESETS) + list(state.user_presets)


def apply_preset (state: State, track_index: int, name: str) -> State:

	"""
	Load a preset's random config into a track. Factory presets are searched
	first, then user presets; an unknown name leaves the state untouched.
	"""

	for preset in all_presets(state):
		if preset.name == name:
			logger.debug(f"Applying preset {name!r} to track {track_index}")
			return set_random_config(state, track_index, preset.config)

	logger.debug(f"No preset named {name!r}")

	return state


# ─── Generation ───────────────────────────────────────────────────────────────


def _seed_or_now (seed: typing.Optional[int]) -> int:

	return polystep.rng.default_seed() if seed is None else seed


def randomize_track_pattern (state: State, track_index: int, seed: typing.Optional[int] = None) -> State:

	"""
	Regenerate all four lanes of a track from its random config.
	"""

	if not _valid_index(state.tracks, track_index):
		return state

	track = state.tracks[track_index]
	lengths = {sid: track.subtrack(sid).length for sid in SubtrackId}

	generated = polystep.randomizer.randomize_track(state.random_configs[track_index], lengths, _seed_or_now(seed))

	gate_steps = tuple(
		polystep.models.GateStep(on=on, length=length, ratchet=ratchet)
		for on, length, ratchet in zip(generated.gate, generated.gate_length, generated.ratchet)
	)

	pitch_steps = tuple(
		polystep.models.PitchStep(note=note, slide=slide)
		for note, slide in zip(generated.pitch, generated.slide)
	)

	return _update_track(state, track_index, lambda t: dataclasses.replace(
		t,
		gate = dataclasses.replace(t.gate, steps=gate_steps),
		pitch = dataclasses.replace(t.pitch, steps=pitch_steps),
		velocity = dataclasses.replace(t.velocity, steps=generated.velocity),
		mod = dataclasses.replace(t.mod, steps=generated.mod),
	))


def randomize_gate_pattern (state: State, track_index: int, seed: typing.Optional[int] = None) -> State:

	"""Regenerate the gate lane, including gate lengths and ratchets.

	When the track's gate config asks for more than one smart bar, a multi-bar
	phrase of at most four bars is generated and the lane is resized to fit it.
	"""

	if not _valid_index(state.tracks, track_index):
		return state

	track = state.tracks[track_index]
	config = state.random_configs[track_index]
	seed = _seed_or_now(seed)

	if config.gate.smart_bars > 1:
		gates = polystep.smart_gate.generate_smart_gate_pattern(
			fill_min = config.gate.fill_min,
			fill_max = config.gate.fill_max,
			steps_per_bar = polystep.constants.STEPS_PER_BAR,
			bars = min(config.gate.smart_bars, polystep.constants.MAX_SMART_BARS),
			density = config.gate.smart_density,
			seed = seed,
		)
	else:
		gates = polystep.randomizer.randomize_gates(config.gate, track.gate.length, seed)

	lengths = polystep.randomizer.randomize_gate_length(config.gate_length, len(gates), seed + polystep.constants.SEED_OFFSET_GATE_LENGTH)
	ratchets = polystep.randomizer.randomize_ratchets(config.ratchet, len(gates), seed + polystep.constants.SEED_OFFSET_RATCHET)

	steps = tuple(
		polystep.models.GateStep(on=on, length=length, ratchet=ratchet)
		for on, length, ratchet in zip(gates, lengths, ratchets)
	)

	return _update_lane(
		state, track_index, SubtrackId.GATE,
		lambda sub: dataclasses.replace(sub, steps=steps, length=len(steps), current_step=sub.current_step % len(steps))
	)


def randomize_pitch_pattern (state: State, track_index: int, seed: typing.Optional[int] = None) -> State:

	"""
	Regenerate the pitch lane and its slides. Uses the arpeggiator when the track's arp is enabled.
	"""

	if not _valid_index(state.tracks, track_index):
		return state

	track = state.tracks[track_index]
	config = state.random_configs[track_index]
	arp = state.arp_configs[track_index]
	seed = _seed_or_now(seed)
	length = track.pitch.length

	if arp.enabled:
		notes = polystep.arpeggiator.generate_arp_pattern(config.pitch.root, config.pitch.scale, arp.direction, arp.octave_range, length, seed)
	else:
		notes = polystep.randomizer.randomize_pitch(config.pitch, length, seed)

	slides = polystep.randomizer.randomize_slides(config.slide.probability, length, seed + polystep.constants.SEED_OFFSET_SLIDE)

	steps = tuple(polystep.models.PitchStep(note=note, slide=slide) for note, slide in zip(notes, slides))

	return _update_lane(state, track_index, SubtrackId.PITCH, lambda sub: dataclasses.replace(sub, steps=steps))


def randomize_velocity_pattern (state: State, track_index: int, seed: typing.Optional[int] = None) -> State:

	"""Regenerate the velocity lane."""

	if not _valid_index(state.tracks, track_index):
		return state

	config = state.random_configs[track_index].velocity
	length = state.tracks[track_index].velocity.length
	steps = tuple(polystep.randomizer.randomize_velocity(config, length, _seed_or_now(seed)))

	return _update_lane(state, track_index, SubtrackId.VELOCITY, lambda sub: dataclasses.replace(sub, steps=steps))


def randomize_mod_pattern (state: State, track_index: int, seed: typing.Optional[int] = None) -> State:

	"""Regenerate the mod lane from the random config."""

	if not _valid_index(state.tracks, track_index):
		return state

	config = state.random_configs[track_index].mod
	length = state.tracks[track_index].mod.length
	steps = tuple(polystep.randomizer.randomize_mod(config, length, _seed_or_now(seed)))

	return _update_lane(state, track_index, SubtrackId.MOD, lambda sub: dataclasses.replace(sub, steps=steps))


def regenerate_lfo (state: State, track_index: int, seed: int = 0) -> State:

	"""Render the track's LFO config into its mod lane."""

	if not _valid_index(state.tracks, track_index):
		return state

	lfo = state.lfo_configs[track_index]
	length = state.tracks[track_index].mod.length
	steps = tuple(polystep.lfo.generate_lfo_pattern(lfo.waveform, lfo.rate, lfo.depth, lfo.offset, length, seed))

	return _update_lane(state, track_index, SubtrackId.MOD, lambda sub: dataclasses.replace(sub, steps=steps))


def drift_track (state: State, track_index: int, seed: typing.Optional[int] = None) -> State:

	"""
	Apply one round of drift to a track right now, regardless of its trigger policy.
	"""

	if not _valid_index(state.tracks, track_index):
		return state

	track = state.tracks[track_index]
	drifted = polystep.mutator.mutate_track(track, state.random_configs[track_index], state.mutate_configs[track_index], _seed_or_now(seed))

	if drifted is track:
		return state

	return dataclasses.replace(state, tracks=polystep.models.replace_at(state.tracks, track_index, drifted))
