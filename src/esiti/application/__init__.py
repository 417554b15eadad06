"""Application layer: ports, in-memory state and use cases."""
