"""Terminal front-end for browsing resource schemas and instances."""
