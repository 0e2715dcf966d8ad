"""Request builders — One immutable builder per operation family."""
