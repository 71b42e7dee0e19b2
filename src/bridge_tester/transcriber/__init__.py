"""Transcription worker process."""
