"""Fetcher for voice-preview clips."""

from .http import HttpFetcher


class PreviewFetcher(HttpFetcher):
    """Download short voice-preview audio clips from their hosted URL."""

    accept = "audio/*"
