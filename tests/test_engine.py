import dataclasses

import pytest

from speechcut import engine as engine_mod
from speechcut.config import AppConfig, ModelConfig, VadConfig
from speechcut.engine import build_classifier
from speechcut.errors import ClassifierError
from speechcut.inference import EnergyScorer


def _config(**model):
    return AppConfig(model=ModelConfig(**model))


def test_heuristic_backend(tmp_path):
    labeler = build_classifier(_config(backend="heuristic"), base_dir=tmp_path)
    assert labeler.backend == "heuristic"
    assert isinstance(labeler.scorer, EnergyScorer)
    assert labeler.backend_note == ""


def test_auto_falls_back_when_model_missing(tmp_path):
    labeler = build_classifier(_config(backend="auto"), base_dir=tmp_path)
    assert labeler.backend == "heuristic"
    assert "not found" in labeler.backend_note


def test_auto_falls_back_when_model_fails_to_load(tmp_path, monkeypatch):
    (tmp_path / "models").mkdir()
    (tmp_path / "models" / "silero_vad.onnx").write_bytes(b"junk")

    def broken(*args, **kwargs):
        raise RuntimeError("bad model")

    monkeypatch.setattr(engine_mod, "SileroOnnxScorer", broken)
    labeler = build_classifier(_config(backend="auto"), base_dir=tmp_path)
    assert labeler.backend == "heuristic"
    assert "bad model" in labeler.backend_note


def test_explicit_onnx_missing_model_is_fatal(tmp_path):
    with pytest.raises(ClassifierError):
        build_classifier(_config(backend="onnx"), base_dir=tmp_path)


def test_explicit_onnx_load_failure_is_fatal(tmp_path, monkeypatch):
    (tmp_path / "models").mkdir()
    (tmp_path / "models" / "silero_vad.onnx").write_bytes(b"junk")

    def broken(*args, **kwargs):
        raise RuntimeError("bad model")

    monkeypatch.setattr(engine_mod, "SileroOnnxScorer", broken)
    with pytest.raises(ClassifierError, match="Failed to create VAD"):
        build_classifier(_config(backend="onnx"), base_dir=tmp_path)


def test_onnx_backend_used_when_model_loads(tmp_path, monkeypatch):
    (tmp_path / "models").mkdir()
    (tmp_path / "models" / "silero_vad.onnx").write_bytes(b"junk")

    class FakeSilero:
        def __init__(self, path, *, sample_rate, chunk_size):
            self.path = path
            self.sample_rate = sample_rate
            self.chunk_size = chunk_size

    monkeypatch.setattr(engine_mod, "SileroOnnxScorer", FakeSilero)
    labeler = build_classifier(_config(backend="auto"), base_dir=tmp_path)
    assert labeler.backend == "onnx"
    assert labeler.scorer.sample_rate == 16000
    assert labeler.scorer.chunk_size == 512


def test_unknown_backend_is_fatal(tmp_path):
    with pytest.raises(ClassifierError, match="Unknown model.backend"):
        build_classifier(_config(backend="neural"), base_dir=tmp_path)


@pytest.mark.parametrize(
    "vad",
    [
        VadConfig(chunk_size=0),
        VadConfig(threshold=1.5),
        VadConfig(padding_chunks=-1),
    ],
)
def test_invalid_vad_settings_are_fatal(tmp_path, vad):
    config = dataclasses.replace(_config(backend="heuristic"), vad=vad)
    with pytest.raises(ClassifierError):
        build_classifier(config, base_dir=tmp_path)


def _with_model(tmp_path):
    (tmp_path / "models").mkdir()
    (tmp_path / "models" / "silero_vad.onnx").write_bytes(b"junk")


def test_explicit_onnx_rejects_unsupported_chunk_size(tmp_path):
    _with_model(tmp_path)
    config = AppConfig(model=ModelConfig(backend="onnx"), vad=VadConfig(chunk_size=1024))
    with pytest.raises(ClassifierError, match="Failed to create VAD.*chunk_size=512"):
        build_classifier(config, base_dir=tmp_path)


def test_auto_falls_back_on_unsupported_chunk_size(tmp_path):
    _with_model(tmp_path)
    config = AppConfig(model=ModelConfig(backend="auto"), vad=VadConfig(chunk_size=1024))
    labeler = build_classifier(config, base_dir=tmp_path)
    assert labeler.backend == "heuristic"
    assert isinstance(labeler.scorer, EnergyScorer)
    assert "chunk_size" in labeler.backend_note


def test_heuristic_accepts_any_positive_chunk_size(tmp_path):
    config = AppConfig(model=ModelConfig(backend="heuristic"), vad=VadConfig(chunk_size=1024))
    assert build_classifier(config, base_dir=tmp_path).backend == "heuristic"
