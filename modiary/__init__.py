"""Modiary: routines, calendar schedule and diary kept in a local store."""
