"""Document persistence backends for CleanTrack."""
