"""HTTP API for the World Universities Directory."""
