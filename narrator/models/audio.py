"""Playable audio handle returned by synthesis."""

import base64
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_AUDIO_TYPE = "audio/wav"


@dataclass
class AudioResult:
    """Playable narration audio.

    Holds either inline audio bytes or a locator (URL) pointing at the
    audio. Ownership passes to the caller, who must call release()
    when done; the narrator never releases a handle on its own.

    Attributes:
        media_type: Audio MIME type (e.g. "audio/wav")
        url: Remote locator, when the provider returned one
        run_id: Provider run that produced the audio
    """

    media_type: str = DEFAULT_AUDIO_TYPE
    url: Optional[str] = None
    run_id: Optional[str] = None
    _content: Optional[bytes] = field(default=None, repr=False)
    _released: bool = field(default=False, repr=False)

    @classmethod
    def from_bytes(
        cls, content: bytes, media_type: str = DEFAULT_AUDIO_TYPE, run_id: Optional[str] = None
    ) -> "AudioResult":
        """Create a handle wrapping inline audio bytes."""
        return cls(media_type=media_type, run_id=run_id, _content=bytes(content))

    @classmethod
    def from_url(
        cls, url: str, media_type: str = DEFAULT_AUDIO_TYPE, run_id: Optional[str] = None
    ) -> "AudioResult":
        """Create a handle referencing remote audio."""
        return cls(media_type=media_type, url=url, run_id=run_id)

    @property
    def is_inline(self) -> bool:
        return self.url is None

    @property
    def released(self) -> bool:
        return self._released

    @property
    def content(self) -> bytes:
        """Inline audio bytes.

        Raises:
            ValueError: If the handle was released or only holds a URL
        """
        self._ensure_live()
        if self._content is None:
            raise ValueError("Audio result references a URL and has no inline content")
        return self._content

    @property
    def size_bytes(self) -> int:
        return len(self._content) if self._content is not None else 0

    @property
    def extension(self) -> str:
        """File extension matching the media type (wav, mpeg → mp3, ...)."""
        subtype = self.media_type.split("/", 1)[-1].split(";", 1)[0].strip().lower()
        if subtype in ("mpeg", "mp3"):
            return "mp3"
        if subtype in ("x-wav", "wave", "vnd.wave"):
            return "wav"
        return subtype or "wav"

    @property
    def locator(self) -> str:
        """A resolvable locator: the URL, or a data: URI for inline audio."""
        self._ensure_live()
        return self.url if self.url is not None else self.to_data_uri()

    def to_data_uri(self) -> str:
        """Encode inline audio as a data: URI usable by a media element."""
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"

    def release(self) -> None:
        """Drop the underlying audio. Safe to call more than once."""
        self._content = None
        self._released = True

    def _ensure_live(self) -> None:
        if self._released:
            raise ValueError("Audio result has been released")
