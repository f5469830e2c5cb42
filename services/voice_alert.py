"""
Voice alert delivery.
Uses Edge TTS to render the posture alert phrase, cached on disk by text hash.
"""

import hashlib
from pathlib import Path
from typing import Optional
import edge_tts
from utils.debug import debug_log
import config as cfg


class VoiceAlertGenerator:
    """Generates alert audio files using Edge TTS."""

    def __init__(self, cache_dir: Path = cfg.AUDIO_CACHE_DIR, url_prefix: str = cfg.AUDIO_URL_PREFIX):
        self.cache_dir = Path(cache_dir)
        self.url_prefix = url_prefix

    def _get_cache_key(self, text: str) -> str:
        return hashlib.md5(text.encode()).hexdigest()

    def _get_cache_path(self, text: str) -> Path:
        return self.cache_dir / f"{self._get_cache_key(text)}.mp3"

    def _url_for(self, path: Path) -> str:
        return f"{self.url_prefix}/{path.name}"

    async def generate_audio(self, text: str = cfg.ALERT_MESSAGE) -> Optional[str]:
        """
        Render the text to speech.
        Returns the URL of the audio file, or None if generation fails.
        """
        try:
            cache_path = self._get_cache_path(text)
            if cache_path.exists():
                return self._url_for(cache_path)

            self.cache_dir.mkdir(parents=True, exist_ok=True)
            communicate = edge_tts.Communicate(
                text,
                voice=cfg.VOICE,
                rate=cfg.VOICE_RATE,
                pitch=cfg.VOICE_PITCH
            )
            await communicate.save(str(cache_path))

            return self._url_for(cache_path)
        except Exception as e:
            debug_log(f"[VOICE] Audio generation failed for '{text[:50]}': {e}")
            return None


voice_alerts = VoiceAlertGenerator()
