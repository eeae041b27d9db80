"""Iglu client: self-describing JSON validation against resolved schemas."""
