"""Session-based authentication service: server-side sessions, signed cookies and role-gated routes."""
