"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_mc_properties: Monte Carlo bounds and reduction invariants
    test_volatility_properties: Historical volatility invariants
"""
