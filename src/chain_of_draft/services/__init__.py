"""Session storage, lifecycle policy and the per-kind registry."""
