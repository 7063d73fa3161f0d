"""Domain layer: pure types and rules with no I/O.

Record keys, match classification, identities, and the error hierarchy.
"""
