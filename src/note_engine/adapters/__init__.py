"""Host integrations for the note engine."""
