"""Processing utilities: state space coercion and the log-distance observable."""

from evt_dimensions.processing.log_distances import ScratchBuffer, log_distances_from_index, log_distances_to
from evt_dimensions.processing.state_space import as_state_space_set

__all__ = ["ScratchBuffer", "log_distances_from_index", "log_distances_to", "as_state_space_set"]
