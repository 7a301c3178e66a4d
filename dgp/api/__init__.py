"""Practice API routers."""
