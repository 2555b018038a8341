"""Slice state traces down to one transition's time window.

Each trace is filtered independently with the same ``[start, end]`` bounds.
Window-manager and layer snapshots are sampled by different producers, so
the first and last entries of the two slices need not line up: a boundary
sample may show state from up to one sample before or after the real edge of
the transition.  Checks must tolerate that skew; this module does not try to
re-align the traces.
"""

from __future__ import annotations

from flickercheck.core.trace import LayersTrace, WindowManagerTrace
from flickercheck.core.transition import Transition


def split_traces(
    transition: Transition,
    wm_trace: WindowManagerTrace,
    layers_trace: LayersTrace,
) -> tuple[WindowManagerTrace, LayersTrace]:
    # TODO: replace independent filtering once traces carry a shared vsync id to align on.
    filtered_wm_trace = wm_trace.filter(transition.start, transition.end)
    filtered_layers_trace = layers_trace.filter(transition.start, transition.end)
    return filtered_wm_trace, filtered_layers_trace


__all__ = ["split_traces"]
