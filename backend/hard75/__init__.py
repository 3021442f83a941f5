"""75 Hard challenge tracker with PMS-Safe mode."""
