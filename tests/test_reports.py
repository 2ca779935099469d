import json

import numpy as np
import soundfile as sf

from speechcut.reports import build_report, segment_to_dict, write_json_report, write_segment_wavs
from speechcut.segments import make_segment


def _segments():
    buffer = (np.arange(4000) - 2000).astype(np.int16)
    return [make_segment(buffer, 0, 1600, 16000), make_segment(buffer, 2400, 4000, 16000)]


def test_segment_to_dict():
    d = segment_to_dict(_segments()[1])
    assert d["start_sample"] == 2400
    assert d["end_sample"] == 4000
    assert d["start_time_seconds"] == 0.15
    assert d["end_time_seconds"] == 0.25
    assert d["num_samples"] == 1600
    assert "audio_base64" not in d
    assert segment_to_dict(_segments()[0], include_audio=True)["audio_base64"]


def test_build_and_write_report(tmp_path):
    report = build_report(
        _segments(), source="in.wav", sample_rate=16000, backend="heuristic", transcripts=["a", "b"]
    )
    assert report["segment_count"] == 2
    assert abs(report["speech_seconds"] - 0.2) < 1e-9
    assert [s["text"] for s in report["segments"]] == ["a", "b"]

    path = tmp_path / "report.json"
    write_json_report(report, path)
    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert loaded["source"] == "in.wav"
    assert loaded["backend"] == "heuristic"


def test_write_segment_wavs(tmp_path):
    segments = _segments()
    paths = write_segment_wavs(segments, tmp_path / "out", stem="clip")
    assert [p.name for p in paths] == ["clip_segment_000.wav", "clip_segment_001.wav"]
    data, sr = sf.read(paths[1], dtype="int16")
    assert sr == 16000
    assert np.array_equal(data, segments[1].samples)
