from __future__ import annotations

from pathlib import Path

import numpy as np

from speechcut.labeling import ChunkScorer
from speechcut.vad import to_float


class SileroOnnxScorer(ChunkScorer):
    """Silero VAD (v5 ONNX export) as a streaming chunk scorer.

    The model is recurrent: ``state`` carries over between chunks and each
    chunk is prefixed with the tail of the previous one (64 samples at 16 kHz,
    32 at 8 kHz).
    """

    STATE_SHAPE = (2, 1, 128)
    # The v5 export only accepts one chunk length per rate.
    CHUNK_SIZES = {16000: 512, 8000: 256}

    def __init__(self, path: Path, *, sample_rate: int = 16000, chunk_size: int = 512) -> None:
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(str(self._path))
        if int(sample_rate) not in self.CHUNK_SIZES:
            raise ValueError(f"Silero VAD supports 8000 or 16000 Hz, got {sample_rate}")
        expected = self.CHUNK_SIZES[int(sample_rate)]
        if int(chunk_size) != expected:
            raise ValueError(
                f"Silero VAD at {int(sample_rate)} Hz requires chunk_size={expected}, got {chunk_size}"
            )

        try:
            import onnxruntime as ort  # type: ignore
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(
                "onnxruntime is required for model.backend=onnx; install `onnxruntime`."
            ) from exc

        # Single-threaded CPU session; one chunk at a time.
        sess_opts = ort.SessionOptions()
        sess_opts.inter_op_num_threads = 1
        sess_opts.intra_op_num_threads = 1
        self._session = ort.InferenceSession(
            self._path.as_posix(), sess_options=sess_opts, providers=["CPUExecutionProvider"]
        )

        input_names = {str(i.name) for i in self._session.get_inputs()}
        missing = {"input", "state", "sr"} - input_names
        if missing:
            raise RuntimeError(f"Not a Silero VAD v5 model, missing inputs: {sorted(missing)}")

        self._sample_rate = int(sample_rate)
        self._chunk_size = int(chunk_size)
        self._context_size = 64 if self._sample_rate == 16000 else 32
        self._sr = np.array(self._sample_rate, dtype=np.int64)
        self.reset()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def reset(self) -> None:
        self._state = np.zeros(self.STATE_SHAPE, dtype=np.float32)
        self._context = np.zeros((1, self._context_size), dtype=np.float32)

    def predict(self, chunk: np.ndarray) -> float:
        x = to_float(chunk).reshape(1, -1)
        x = np.concatenate([self._context, x], axis=1)

        outputs = self._session.run(None, {"input": x, "state": self._state, "sr": self._sr})
        if len(outputs) < 2:
            raise RuntimeError("Silero VAD returned no state output.")

        prob, self._state = outputs[0], np.asarray(outputs[1], dtype=np.float32)
        self._context = x[:, -self._context_size :]

        p = float(np.asarray(prob).reshape(-1)[0])
        return float(np.clip(p, 0.0, 1.0))
