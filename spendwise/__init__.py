"""SpendWise transaction presentation engine."""
