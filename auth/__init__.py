"""
auth — credentials and the password-reset protocol.

Provides:
  • Password hashing (bcrypt)
  • Session token issuing (JWT, HS256)
  • Verification-code issue / verify
  • Account-flow exceptions
"""
