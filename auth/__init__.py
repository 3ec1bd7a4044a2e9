"""
auth — User authentication module.

Provides:
  • JWT creation & verification (PyJWT, HS256)
  • Password hashing (bcrypt)
  • signup / signin / jwt strategies
  • Signup / Login API routes
  • ``get_current_user`` FastAPI dependency
"""
