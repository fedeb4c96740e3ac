"""Authentication and authorization.

Learn: One path — username/email + password → signed JWT bearer token.
The token dependencies resolve it to the current User for each request;
require_role / require_ownership gate what that user may do.
"""
