"""Profile draft synchronization domain."""
