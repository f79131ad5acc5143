"""Complaint workflow, data model and media upload for CleanTrack."""
