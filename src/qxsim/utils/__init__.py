# Utility Functions
#
# Common utilities used across the simulator.
#
# Submodules:
#   - math_utils: State fidelity, basis-state helpers
#   - visualization: Plotting of measurement statistics
#
# visualization imports matplotlib; import it explicitly when needed:
#   from qxsim.utils.visualization import plot_average_measurement

from .math_utils import fidelity, state_fidelity, basis_state_label

__all__ = ["fidelity", "state_fidelity", "basis_state_label"]
