import numpy as np
import pytest

from speechcut.errors import ClassifierError
from speechcut.inference import EnergyScorer
from speechcut.labeling import ChunkScorer, ScoredLabeler
from speechcut.types import Label


class ScriptedScorer(ChunkScorer):
    """Returns a fixed probability per chunk, in call order."""

    def __init__(self, probs):
        self.probs = list(probs)
        self.calls = 0
        self.resets = 0
        self.sizes = []

    def predict(self, chunk):
        self.sizes.append(int(chunk.size))
        p = self.probs[self.calls]
        self.calls += 1
        return p

    def reset(self):
        self.resets += 1
        self.calls = 0


def _run(probs, padding, chunk_size=4, threshold=0.5):
    scorer = ScriptedScorer(probs)
    samples = np.arange(len(probs) * chunk_size, dtype=np.int16)
    labels = list(
        ScoredLabeler(scorer).label_stream(
            samples, chunk_size=chunk_size, threshold=threshold, padding_chunks=padding
        )
    )
    return "".join("S" if lbl.label is Label.SPEECH else "N" for lbl in labels), labels


def test_without_padding_labels_follow_threshold():
    pattern, _ = _run([0.1, 0.9, 0.9, 0.2, 0.7, 0.1], padding=0)
    assert pattern == "NSSNSN"


def test_threshold_is_strict():
    pattern, _ = _run([0.5, 0.51], padding=0)
    assert pattern == "NS"


def test_padding_extends_before_and_after_speech():
    pattern, _ = _run([0, 0, 0, 0, 1, 0, 0, 0, 0, 0], padding=2)
    assert pattern == "NNSSSSSNNN"


def test_padding_bridges_short_pauses():
    pattern, _ = _run([1, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0], padding=2)
    # hangover covers chunks 1-2, pre-roll covers chunk 3
    assert pattern == "SSSSSSSNNNNN"


def test_labels_keep_chunk_order_and_data():
    _, labels = _run([0, 0, 1, 0, 0, 0], padding=1)
    starts = [int(lbl.samples[0]) for lbl in labels]
    assert starts == [0, 4, 8, 12, 16, 20]


def test_one_label_per_chunk_including_partial_tail():
    scorer = ScriptedScorer([0.9, 0.9, 0.9])
    samples = np.ones(10, dtype=np.int16)
    labels = list(ScoredLabeler(scorer).label_stream(samples, chunk_size=4, threshold=0.5, padding_chunks=2))
    assert len(labels) == 3
    assert labels[-1].samples.size == 2
    # scorers always see full-size chunks
    assert scorer.sizes == [4, 4, 4]


def test_scorer_is_reset_per_stream():
    scorer = ScriptedScorer([0.9, 0.1])
    labeler = ScoredLabeler(scorer)
    samples = np.ones(8, dtype=np.int16)
    for _ in range(2):
        list(labeler.label_stream(samples, chunk_size=4, threshold=0.5, padding_chunks=0))
    assert scorer.resets == 2


class FailingScorer(ChunkScorer):
    def __init__(self, fail_at):
        self.fail_at = fail_at
        self.calls = 0

    def predict(self, chunk):
        self.calls += 1
        if self.calls > self.fail_at:
            raise RuntimeError("Got invalid dimensions for input")
        return 0.9


def test_scorer_failure_surfaces_as_classifier_error():
    labeler = ScoredLabeler(FailingScorer(fail_at=2))
    stream = labeler.label_stream(np.ones(16, dtype=np.int16), chunk_size=4, threshold=0.5, padding_chunks=0)
    assert next(stream).label is Label.SPEECH
    assert next(stream).label is Label.SPEECH
    with pytest.raises(ClassifierError, match="at sample 8") as excinfo:
        next(stream)
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_empty_input_yields_no_labels():
    labeler = ScoredLabeler(ScriptedScorer([]))
    assert list(labeler.label_stream(np.zeros(0, dtype=np.int16), chunk_size=512, threshold=0.5, padding_chunks=2)) == []


def test_energy_scorer_centres_on_threshold():
    scorer = EnergyScorer(threshold_db=-30.0)
    silence = np.zeros(512, dtype=np.int16)
    loud = (np.sin(np.arange(512) / 3.0) * 20000).astype(np.int16)
    assert scorer.predict(silence) == 0.0
    assert scorer.predict(loud) > 0.99


def test_energy_scorer_rejects_bad_slope():
    with pytest.raises(ValueError):
        EnergyScorer(slope_db=0.0)
