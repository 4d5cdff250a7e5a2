"""Tagging bounded context.

Users label tracks with their own tags. Every tag and association is
owned by one user and is only visible to that user.
"""
