import pytest

import polystep.models
import polystep.sequencer


@pytest.fixture
def state () -> polystep.models.SequencerState:

	"""A freshly created session: four silent 16-step tracks."""

	return polystep.sequencer.create_sequencer()


@pytest.fixture
def randomized_state (state: polystep.models.SequencerState) -> polystep.models.SequencerState:

	"""A session with every track generated from a fixed seed."""

	for index in range(len(state.tracks)):
		state = polystep.sequencer.randomize_track_pattern(state, index, seed=100 + index)

	return state


@pytest.fixture
def varied_track () -> polystep.models.Track:

	"""A generated track whose gate lengths and ratchets vary step to step."""

	config = polystep.models.RandomConfig(
		gate_length = polystep.models.GateLengthConfig(min=0.1, max=0.9),
		ratchet = polystep.models.RatchetConfig(max_ratchet=4, probability=0.5),
		slide = polystep.models.SlideConfig(probability=0.5),
	)

	state = polystep.sequencer.create_sequencer()
	state = polystep.sequencer.set_random_config(state, 0, config)
	state = polystep.sequencer.randomize_track_pattern(state, 0, seed=7)

	return state.tracks[0]
