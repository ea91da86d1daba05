import argparse
import logging

import polystep.config
import polystep.constants
import polystep.midi_export


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main () -> None:

	"""
	Render a configured session to a MIDI file.
	"""

	parser = argparse.ArgumentParser(description="Polystep polymetric step sequencer")
	parser.add_argument("--config", default="polystep.yaml", help="YAML session file (default: polystep.yaml)")
	parser.add_argument("--bars", type=int, default=8, help="Bars to render (default: 8)")
	parser.add_argument("--output", default="polystep.mid", help="MIDI file to write (default: polystep.mid)")
	parser.add_argument("--seed", type=int, default=None, help="Seed for pattern generation (overrides the config)")
	args = parser.parse_args()

	logger.info("Polystep starting...")

	config = polystep.config.load_config(args.config)
	state = polystep.config.build_state(config, seed=args.seed)

	ticks = max(1, args.bars) * polystep.constants.STEPS_PER_BAR
	state = polystep.midi_export.render(state, ticks, args.output)

	logger.info(f"Rendered {args.bars} bars ({state.transport.master_tick} steps) to {args.output}")


if __name__ == "__main__":
	main()
