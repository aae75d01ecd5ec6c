"""JSON transport for registration, authentication and listings."""
