"""Infrastructure adapters: storage and remote sync."""
