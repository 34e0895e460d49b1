"""Core size-tracking logic: codec, storage, diff, gate, workflow."""
