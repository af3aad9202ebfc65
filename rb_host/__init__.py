"""Host-side collaborators answering view intents."""
