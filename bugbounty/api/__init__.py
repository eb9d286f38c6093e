"""HTTP API: application factory, routers and middleware."""
