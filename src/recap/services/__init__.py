"""HTTP clients for the external conversation and speech services."""
