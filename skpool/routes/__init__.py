"""HTTP routes for the pool manager."""
