"""
Configuration module.

Static instrument universe tables, tunable default parameters, and the
YAML-backed loader with layered overrides.
"""
