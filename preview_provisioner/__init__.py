"""Preview server provisioner (checkpointed, resumable).

Core design goals:
- Checkpoint-driven and resumable
- Idempotent steps
- Fail fast, resume exactly after the last good step
- Centralized logging
"""

__all__ = []
