from intake.extraction.base import BaseExtractionStrategy


class PlainTextStrategy(BaseExtractionStrategy):
    """Passes text files through unchanged, apart from decoding."""

    name = "plain-text"

    def extract(self, data: bytes, mime_type: str) -> str:
        if data.startswith(b"\xef\xbb\xbf"):
            data = data[3:]
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return data.decode("latin-1")
