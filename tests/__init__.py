# Tests for qxsim
#
# Test organization mirrors source structure:
#   - test_core/: Register, measurement engine, gates, circuits, counter
#   - test_noise_models/: Depolarizing channel transformer
#   - test_statistics.py: Repeated-trial averaging and binomial resampling
#   - test_simulator.py: End-to-end program execution
#   - test_utils.py: Configuration, fidelity and plotting helpers
#
# Running tests:
#   pytest tests/
#   pytest tests/test_core/ -v
#   pytest tests/ -k "binomial"
