"""
Services module - recording pipeline, providers, and storage.
"""
