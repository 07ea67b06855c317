"""HTTP API: routes and schemas."""
