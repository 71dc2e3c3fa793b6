"""
Test suite for the NetOps portal

Unit tests run against an in-memory fake backend (see conftest.py):
- Remote client error normalization and retry
- Chunked and degrading-limit fetch policies
- Procedure wrappers and filter normalization
- Session gate, login/logout and password checks
- API endpoints, CLI commands and the dashboard HTTP client
"""
