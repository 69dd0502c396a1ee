"""Secret detection and masking helpers."""
