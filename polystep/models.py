"""Immutable records for the sequencer state.

Every record is a frozen dataclass and every sequence inside one is a tuple.
Engine operations never modify a record; they build a new one with
``dataclasses.replace`` and reuse the untouched branches, so callers can
detect change by identity (``is``) as well as by equality.
"""

import dataclasses
import enum
import typing

import polystep.constants
import polystep.scales

T = typing.TypeVar("T")


GATE_MODES: typing.Tuple[str, ...] = ("random", "euclidean")
SMART_DENSITIES: typing.Tuple[str, ...] = ("build", "decay", "build-drop", "variation")
LFO_WAVEFORMS: typing.Tuple[str, ...] = ("sine", "triangle", "saw", "slew-random")
ARP_DIRECTIONS: typing.Tuple[str, ...] = ("up", "down", "triangle", "random")
MUTATE_TRIGGERS: typing.Tuple[str, ...] = ("loop", "bars")


class SubtrackId (enum.Enum):

	"""
	The four parameter lanes of a track.
	"""

	GATE = "gate"
	PITCH = "pitch"
	VELOCITY = "velocity"
	MOD = "mod"


@dataclasses.dataclass(frozen=True)
class GateStep:

	"""
	Gate data for one step: on/off, open time as a fraction of the step, sub-trigger count.
	"""

	on: bool = False
	length: float = polystep.constants.DEFAULT_GATE_LENGTH
	ratchet: int = 1


@dataclasses.dataclass(frozen=True)
class PitchStep:

	"""
	A MIDI note plus portamento time in seconds (0 = no slide).
	"""

	note: int = polystep.constants.DEFAULT_NOTE
	slide: float = 0.0


@dataclasses.dataclass(frozen=True)
class Subtrack (typing.Generic[T]):

	"""
	One lane of a track with its own length and clock divider.

	``len(steps) == length`` and ``0 <= current_step < length`` always hold.
	"""

	steps: typing.Tuple[T, ...]
	length: int = polystep.constants.DEFAULT_LENGTH
	clock_divider: int = 1
	current_step: int = 0

	@property
	def current (self) -> T:

		"""The value under the playhead."""

		return self.steps[self.current_step]


# Mute lanes have the same shape as subtracks; True means muted.
MuteTrack = Subtrack[bool]


@dataclasses.dataclass(frozen=True)
class Track:

	"""
	A sequence track. The track divider multiplies each subtrack's own divider.
	"""

	id: str
	name: str
	gate: Subtrack[GateStep]
	pitch: Subtrack[PitchStep]
	velocity: Subtrack[int]
	mod: Subtrack[float]
	clock_divider: int = 1

	def subtrack (self, sid: SubtrackId) -> Subtrack[typing.Any]:

		"""Return the lane identified by ``sid``."""

		if sid is SubtrackId.GATE:
			return self.gate
		if sid is SubtrackId.PITCH:
			return self.pitch
		if sid is SubtrackId.VELOCITY:
			return self.velocity
		if sid is SubtrackId.MOD:
			return self.mod

		raise ValueError(f"Unknown subtrack: {sid!r}")

	def with_subtrack (self, sid: SubtrackId, sub: Subtrack[typing.Any]) -> "Track":

		"""Return a copy of the track with one lane replaced."""

		if sid is SubtrackId.GATE:
			return dataclasses.replace(self, gate=sub)
		if sid is SubtrackId.PITCH:
			return dataclasses.replace(self, pitch=sub)
		if sid is SubtrackId.VELOCITY:
			return dataclasses.replace(self, velocity=sub)
		if sid is SubtrackId.MOD:
			return dataclasses.replace(self, mod=sub)

		raise ValueError(f"Unknown subtrack: {sid!r}")


@dataclasses.dataclass(frozen=True)
class OutputRouting:

	"""
	Source track index (0-3) for each parameter of one physical output.
	"""

	gate: int
	pitch: int
	velocity: int
	mod: int


# ─── Generation configs ───────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class PitchConfig:

	"""Pitch range, scale and root. ``max_notes`` 0 means no limit on distinct notes."""

	low: int = 48
	high: int = 72
	scale: polystep.scales.Scale = polystep.scales.SCALES["minor_pentatonic"]
	root: int = 60
	max_notes: int = 4


@dataclasses.dataclass(frozen=True)
class GateConfig:

	"""Fill range (fraction of steps), placement mode and smart-gate phrasing."""

	fill_min: float = 0.25
	fill_max: float = 0.75
	mode: str = "euclidean"
	random_offset: bool = True
	smart_bars: int = 1
	smart_density: str = "build"


@dataclasses.dataclass(frozen=True)
class VelocityConfig:
	low: int = 64
	high: int = 120


@dataclasses.dataclass(frozen=True)
class GateLengthConfig:
	min: float = 0.5
	max: float = 0.5


@dataclasses.dataclass(frozen=True)
class RatchetConfig:
	max_ratchet: int = 1
	probability: float = 0.0


@dataclasses.dataclass(frozen=True)
class SlideConfig:
	probability: float = 0.0


@dataclasses.dataclass(frozen=True)
class ModConfig:
	low: float = 0.0
	high: float = 1.0


@dataclasses.dataclass(frozen=True)
class RandomConfig:

	"""
	Per-track generation constraints used by randomise and drift commands.
	"""

	pitch: PitchConfig = PitchConfig()
	gate: GateConfig = GateConfig()
	velocity: VelocityConfig = VelocityConfig()
	gate_length: GateLengthConfig = GateLengthConfig()
	ratchet: RatchetConfig = RatchetConfig()
	slide: SlideConfig = SlideConfig()
	mod: ModConfig = ModConfig()


@dataclasses.dataclass(frozen=True)
class MutateConfig:

	"""
	Drift settings for a track.

	Each rate is the chance (0-1) that a step of that lane is regenerated when
	the trigger fires. ``trigger`` is ``"loop"`` (each lane at every
	``bars``-th wrap of its own loop) or ``"bars"`` (every ``bars`` bars).
	"""

	trigger: str = "loop"
	bars: int = 1
	gate: float = 0.0
	pitch: float = 0.0
	velocity: float = 0.0
	mod: float = 0.0

	def rate (self, sid: SubtrackId) -> float:

		"""Drift rate for one lane."""

		if sid is SubtrackId.GATE:
			return self.gate
		if sid is SubtrackId.PITCH:
			return self.pitch
		if sid is SubtrackId.VELOCITY:
			return self.velocity
		if sid is SubtrackId.MOD:
			return self.mod

		raise ValueError(f"Unknown subtrack: {sid!r}")


@dataclasses.dataclass(frozen=True)
class LfoConfig:
	enabled: bool = False
	waveform: str = "sine"
	rate: int = 16
	depth: float = 1.0
	offset: float = 0.5


@dataclasses.dataclass(frozen=True)
class ArpConfig:
	enabled: bool = False
	direction: str = "up"
	octave_range: int = 1


@dataclasses.dataclass(frozen=True)
class TransposeConfig:

	"""Semitone offset applied at output time; ``quantize`` snaps the result to the track's scale."""

	semitones: int = 0
	quantize: bool = False


@dataclasses.dataclass(frozen=True)
class MidiOutputConfig:

	"""MIDI rendering settings for one output (``channel`` is 1-based)."""

	enabled: bool = False
	channel: int = 1


@dataclasses.dataclass(frozen=True)
class Transport:
	bpm: float = polystep.constants.DEFAULT_BPM
	playing: bool = False
	master_tick: int = 0


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""
	What one physical output should do on the current tick.
	"""

	output: int
	gate: bool = False
	pitch: int = 0
	velocity: int = 0
	mod: float = 0.0
	gate_length: float = 0.0
	ratchet_count: int = 1
	slide: float = 0.0


@dataclasses.dataclass(frozen=True)
class UserPreset:
	name: str
	config: RandomConfig


@dataclasses.dataclass(frozen=True)
class SequencerState:

	"""
	The aggregate root threaded through every engine call.
	"""

	tracks: typing.Tuple[Track, ...]
	routing: typing.Tuple[OutputRouting, ...]
	mute_patterns: typing.Tuple[MuteTrack, ...]
	transport: Transport
	random_configs: typing.Tuple[RandomConfig, ...]
	mutate_configs: typing.Tuple[MutateConfig, ...]
	lfo_configs: typing.Tuple[LfoConfig, ...]
	arp_configs: typing.Tuple[ArpConfig, ...]
	transpose_configs: typing.Tuple[TransposeConfig, ...]
	midi_configs: typing.Tuple[MidiOutputConfig, ...]
	user_presets: typing.Tuple[UserPreset, ...] = ()


def replace_at (items: typing.Tuple[T, ...], index: int, value: T) -> typing.Tuple[T, ...]:

	"""
	Return a copy of ``items`` with one element replaced. Every other element keeps its identity.
	"""

	return items[:index] + (value,) + items[index + 1:]
