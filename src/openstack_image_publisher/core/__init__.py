"""Core building blocks: types, sessions and logging."""
