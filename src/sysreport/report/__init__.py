"""System report model, requester classification and assembly."""
