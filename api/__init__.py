"""api — post and comment routes, middleware and error handlers."""
