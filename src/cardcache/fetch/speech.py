"""Speech-synthesis fetcher for the audio cache."""

from urllib.parse import quote, urlencode

from ..errors import InvalidInput
from .http import HttpFetcher

DEFAULT_TTS_ENDPOINT = "https://translate.google.com/translate_tts"


class SpeechFetcher(HttpFetcher):
    """Download synthesized speech as MP3 from a translate_tts style endpoint."""

    accept = "audio/mpeg"

    def __init__(self, *args, endpoint: str = DEFAULT_TTS_ENDPOINT, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.endpoint = endpoint

    def build_url(self, text: str, voice_code: str) -> str:
        """Build the synthesis URL for text in the given voice.

        Args:
            text: Text to speak; surrounding whitespace is dropped
            voice_code: Language or voice code understood by the endpoint

        Returns:
            GET URL with escaped query parameters

        Raises:
            InvalidInput: If text or voice_code is empty
        """
        if not text or not text.strip():
            raise InvalidInput("Text cannot be empty")
        if not voice_code or not voice_code.strip():
            raise InvalidInput("Voice code cannot be empty")

        query = urlencode(
            {
                "ie": "UTF-8",
                "client": "gtx",
                "q": text.strip(),
                "tl": voice_code.strip(),
            },
            quote_via=quote,
        )
        return f"{self.endpoint}?{query}"

    async def synthesize(self, text: str, voice_code: str) -> bytes:
        """Fetch MP3 audio for text."""
        return await self.fetch(self.build_url(text, voice_code))
