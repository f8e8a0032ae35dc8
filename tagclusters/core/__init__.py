"""Configuration, database and error primitives."""
