"""HTTP surface for the dimensional checker."""
