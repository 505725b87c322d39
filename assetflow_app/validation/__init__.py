"""Output contract validation for serialized reports."""
