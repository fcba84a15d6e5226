"""Core building blocks: JSON scanning, HTTP, backend supervision and the catalog gateway."""
