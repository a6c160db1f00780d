"""Credentialed GitHub client for clambake's issue-to-PR workflow.

This package provides:
- Layered credential resolution (environment, then credential files)
- A closed error taxonomy with remediation-rich reports
- A bounded linear-backoff retry policy for issue assignment
- The GitHubOps capability interface, its httpx-backed client and an
  in-memory double for tests
"""

__version__ = "0.1.0"
