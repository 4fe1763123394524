"""HTTP API: FastAPI application factory, routes and middleware."""
