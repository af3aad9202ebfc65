"""Host/view message protocol and the view-side session."""
