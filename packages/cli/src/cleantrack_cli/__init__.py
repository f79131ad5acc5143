"""cleantrack command-line client."""
