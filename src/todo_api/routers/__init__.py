"""HTTP routers for the account and todo endpoints."""
