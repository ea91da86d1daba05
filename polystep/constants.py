"""Engine-wide constants for polystep.

Ranges here are the clamp bounds used by every setter in
``polystep.sequencer`` and by the generators. Defaults describe the state
produced by ``polystep.sequencer.create_sequencer()``.
"""

NUM_TRACKS = 4
NUM_OUTPUTS = 4

# Subtrack geometry
DEFAULT_LENGTH = 16
MIN_LENGTH = 1
MAX_LENGTH = 64
MIN_DIVIDER = 1
MAX_DIVIDER = 32

# One bar is sixteen master ticks (one tick per 16th note).
STEPS_PER_BAR = 16

# Longest smart gate phrase that still fits in one lane.
MAX_SMART_BARS = MAX_LENGTH // STEPS_PER_BAR

# Transport
DEFAULT_BPM = 135
MIN_BPM = 20
MAX_BPM = 300

# MIDI value ranges
MIN_NOTE = 0
MAX_NOTE = 127
MIN_VELOCITY = 0
MAX_VELOCITY = 127
DEFAULT_NOTE = 60
DEFAULT_VELOCITY = 100

# Compound step ranges
MIN_GATE_LENGTH = 0.05
MAX_GATE_LENGTH = 1.0
DEFAULT_GATE_LENGTH = 0.5
MIN_RATCHET = 1
MAX_RATCHET = 4
MAX_SLIDE = 0.5
DEFAULT_SLIDE_TIME = 0.10

# Transpose
MIN_TRANSPOSE = -48
MAX_TRANSPOSE = 48

# LFO / arpeggiator
MIN_LFO_RATE = 1
MAX_LFO_RATE = 64
MIN_OCTAVE_RANGE = 1
MAX_OCTAVE_RANGE = 4
SLEW_ANCHORS = 8

# Derived seed offsets. Each generation task gets its own stream so that
# re-randomising one parameter keeps the others tied to the base seed.
SEED_OFFSET_GATE = 0
SEED_OFFSET_PITCH = 1
SEED_OFFSET_VELOCITY = 2
SEED_OFFSET_GATE_LENGTH = 3
SEED_OFFSET_RATCHET = 4
SEED_OFFSET_SLIDE = 5
SEED_OFFSET_MOD = 6
SEED_OFFSET_MUTATE = 10
