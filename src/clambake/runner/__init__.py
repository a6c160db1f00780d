"""Git subprocess runner.

This module manages git execution for remote branch operations:
- Async subprocess invocation
- Timeout enforcement
- stdout/stderr capture
- Exit code handling for success/failure determination
"""
