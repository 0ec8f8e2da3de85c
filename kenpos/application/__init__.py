"""Application layer: use cases orchestrating the core over the ports."""
