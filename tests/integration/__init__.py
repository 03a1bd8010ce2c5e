"""
Integration Tests Package

End-to-end checks of the build -> layout -> projection pipeline.

TEST AXIOMS:
=============
1. Determinism: same inputs + config = value-equal snapshots
2. Consistency: every edge endpoint is a node of the same snapshot
3. Silent degradation: dangling references are dropped, never raised
"""
