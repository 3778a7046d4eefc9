"""Environment, settings, storage and outbound-request plumbing."""
