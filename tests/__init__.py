"""
SNC Calculator Test Suite.

Unit and integration tests for the bound calculator:
- Symbolic functions and Hoelder pairs
- Arrival/service envelopes and their violation bounds
- The SimpleGradient search and its entry points

Test Files:
- test_hoelder.py: Tests for Hoelder pairs and HoelderFactory
- test_symbolic_functions.py: Tests for the function variants and dispatch
- test_operators.py: Tests for add/maximum/scale/collect_hoelders
- test_arrival.py: Tests for Arrival and Service
- test_simple_gradient.py: Tests for the search loop and minimize()
- test_bounds.py: Tests for bound() and reverse_bound()
- test_constants.py: Tests for the defaults.json settings
- test_cli.py: Tests for the snc-bound CLI and result tables

Usage:
    # Run all tests
    pytest tests/ -v

    # Run only unit tests (fast)
    pytest tests/ -m unit -v

    # Run only integration tests
    pytest tests/ -m integration -v
"""
