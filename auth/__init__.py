"""
auth — User authentication module.

Provides:
  • JWT token creation & verification
  • Password hashing (bcrypt)
  • Register / Login / Logout / Me / Users API routes
  • ``get_current_user`` FastAPI dependency
"""
