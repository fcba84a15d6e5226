"""Host-facing plugin facades."""
