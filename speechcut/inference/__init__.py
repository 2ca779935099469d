__all__ = [
    "EnergyScorer",
    "SileroOnnxScorer",
]

from speechcut.inference.heuristic import EnergyScorer
from speechcut.inference.onnx_backend import SileroOnnxScorer
