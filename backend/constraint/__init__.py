"""Daily puzzle generation pipeline and artifact server for the Constraint word game."""
