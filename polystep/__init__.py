"""
Polystep - a four-track polymetric step-sequencer engine for Python.

Each track is made of four independent lanes (gate, pitch, velocity, mod),
every lane with its own length and clock divider. Lanes of different
lengths drift against one another and only line up again at the least common
multiple of their periods, so a handful of short loops produces long,
slowly evolving phrases.

What it does:

- **Pure state, pure functions.** The whole session is one immutable
  ``SequencerState``. ``tick()`` and every editing command return a new
  state and leave the old one untouched, so snapshots, undo and A/B
  comparisons come for free.
- **Seeded generation.** Euclidean and random gates, smart multi-bar gate
  phrases, scale-constrained pitches with a distinct-note budget, an
  arpeggiator, and an LFO rendered into the mod lane. The same seed always
  produces the same pattern.
- **Drift.** Tracks can regenerate a probabilistic share of their steps at
  loop or bar boundaries, keeping a pattern recognisable while it changes.
- **Routing and mutes.** Four physical outputs pick each parameter from any
  track, with transpose (optionally snapped to the scale) and per-output
  mute lanes.
- **MIDI rendering.** Render a session straight to a standard MIDI file
  with ratchets, gate lengths and mod as CC1.

Minimal example:

    ```python
    import polystep

    state = polystep.create_sequencer()
    state = polystep.sequencer.randomize_track_pattern(state, 0, seed=42)

    for _ in range(16):
        result = polystep.tick(state)
        state = result.state
    ```

Package-level exports: ``create_sequencer``, ``tick``, ``SequencerState``,
``SubtrackId``, ``register_scale``.
"""

import polystep.models
import polystep.scales
import polystep.sequencer


create_sequencer = polystep.sequencer.create_sequencer
tick = polystep.sequencer.tick
SequencerState = polystep.models.SequencerState
SubtrackId = polystep.models.SubtrackId
register_scale = polystep.scales.register_scale
