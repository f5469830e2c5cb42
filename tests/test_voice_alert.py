import services.voice_alert as voice_alert
from services.voice_alert import VoiceAlertGenerator


class FakeCommunicate:
    calls = []

    def __init__(self, text, voice, rate, pitch):
        self.text = text
        FakeCommunicate.calls.append(text)

    async def save(self, path):
        with open(path, "wb") as f:
            f.write(b"ID3")


class BrokenCommunicate(FakeCommunicate):
    async def save(self, path):
        raise ConnectionError("service unavailable")


async def test_audio_is_generated_once_and_cached(tmp_path, monkeypatch):
    FakeCommunicate.calls = []
    monkeypatch.setattr(voice_alert.edge_tts, "Communicate", FakeCommunicate)
    generator = VoiceAlertGenerator(cache_dir=tmp_path / "audio", url_prefix="/static/audio")

    first = await generator.generate_audio("Sit up straight.")
    second = await generator.generate_audio("Sit up straight.")

    assert first == second
    assert first.startswith("/static/audio/") and first.endswith(".mp3")
    assert FakeCommunicate.calls == ["Sit up straight."]
    assert len(list((tmp_path / "audio").iterdir())) == 1


async def test_generation_failure_returns_none(tmp_path, monkeypatch):
    monkeypatch.setattr(voice_alert.edge_tts, "Communicate", BrokenCommunicate)
    generator = VoiceAlertGenerator(cache_dir=tmp_path)
    assert await generator.generate_audio("Sit up straight.") is None
