from flickercheck.trace.io import (
    Traces,
    load_traces,
    read_layers_trace,
    read_transitions_trace,
    read_wm_trace,
    write_layers_trace,
    write_traces,
    write_transitions_trace,
    write_wm_trace,
)
from flickercheck.trace.validate import (
    validate_layers_entry,
    validate_timestamp,
    validate_transition,
    validate_wm_entry,
)

__all__ = [
    "Traces",
    "load_traces",
    "read_layers_trace",
    "read_transitions_trace",
    "read_wm_trace",
    "validate_layers_entry",
    "validate_timestamp",
    "validate_transition",
    "validate_wm_entry",
    "write_layers_trace",
    "write_traces",
    "write_transitions_trace",
    "write_wm_trace",
]
