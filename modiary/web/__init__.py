"""HTTP host layer."""
