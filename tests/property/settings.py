# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Provides consistent test intensity across all property test modules.
Import these instead of using inline @settings(max_examples=...).

Usage:
    from tests.property.settings import STANDARD_SETTINGS

    @given(keys=key_sequences)
    @STANDARD_SETTINGS
    def test_something(keys):
        ...

Tiers:
- STANDARD_SETTINGS: 100 examples - Regular property tests
- SLOW_SETTINGS: 50 examples - Tests that build many graphs per example
- QUICK_SETTINGS: 20 examples - Fast validation tests (simple rejection)
"""

from hypothesis import HealthCheck, settings

# Standard property tests - good balance of coverage and speed
STANDARD_SETTINGS = settings(max_examples=100)

# Every example builds and merges rdflib graphs; keep the count down
SLOW_SETTINGS = settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])

# Quick validation tests - simple input rejection, enum validation
QUICK_SETTINGS = settings(max_examples=20)
