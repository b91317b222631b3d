"""Foundation layer: errors, logging, settings, randomness, timing and fork-join execution."""
