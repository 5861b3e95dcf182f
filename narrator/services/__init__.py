"""Service layer: provider transport and the narration pipeline."""
