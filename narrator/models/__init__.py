"""Domain models for the narrator client."""

from narrator.models.audio import AudioResult
from narrator.models.job import Job, JobState, JobStatus, SynthesisRequest, coerce_voice_selector
from narrator.models.voice import (
    Recognized,
    Unrecognized,
    Voice,
    VoiceListing,
    normalize_voice_listing,
    parse_voices,
)

__all__ = [
    "AudioResult",
    "Job",
    "JobState",
    "JobStatus",
    "SynthesisRequest",
    "coerce_voice_selector",
    "Recognized",
    "Unrecognized",
    "Voice",
    "VoiceListing",
    "normalize_voice_listing",
    "parse_voices",
]
