"""deary - encrypted diary kept in git."""
