"""Core plumbing — Connection handling, result adaptation and errors."""
