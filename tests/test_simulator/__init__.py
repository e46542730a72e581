"""
Simulator Tests

Call registry, elevator trip execution and environment pacing.
"""
