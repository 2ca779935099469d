from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

import numpy as np

from speechcut import progress as milestones
from speechcut.audio.file_reader import check_supported_format, load_audio_file
from speechcut.config import AppConfig
from speechcut.dsp.resample import resample_audio
from speechcut.engine import build_classifier
from speechcut.errors import DecodeError
from speechcut.labeling import SpeechClassifier
from speechcut.preprocess import to_mono
from speechcut.progress import report_progress
from speechcut.segments import assemble_segments, extract_time_range, merge_segments
from speechcut.types import ChunkLabel, ProgressCallback, Segment
from speechcut.windowing import estimate_num_chunks

logger = logging.getLogger(__name__)

Decoder = Callable[[Path], Tuple[np.ndarray, int]]


def _classify(
    classifier: SpeechClassifier,
    audio: np.ndarray,
    *,
    config: AppConfig,
    progress: Optional[ProgressCallback],
) -> list[ChunkLabel]:
    chunk_size = int(config.vad.chunk_size)
    total = estimate_num_chunks(int(audio.size), chunk_size=chunk_size)
    report_progress(
        progress, "Analyzing speech patterns", milestones.CLASSIFY_ANALYZE, "Processing audio chunks for speech detection"
    )

    labels: list[ChunkLabel] = []
    stream = classifier.label_stream(
        audio,
        chunk_size=chunk_size,
        threshold=float(config.vad.threshold),
        padding_chunks=int(config.vad.padding_chunks),
    )
    for label in stream:
        labels.append(label)
        processed = len(labels)
        if total > 0 and processed % 100 == 0:
            span = milestones.CLASSIFY_DONE - milestones.CLASSIFY_ANALYZE
            report_progress(
                progress,
                "Analyzing speech patterns",
                milestones.CLASSIFY_ANALYZE + (processed / total) * span,
                f"Processed {processed}/{total} chunks",
                lo=milestones.CLASSIFY_ANALYZE,
                hi=milestones.CLASSIFY_DONE - 1.0,
            )
    return labels


def process_audio(
    audio: np.ndarray,
    orig_sr: int,
    *,
    config: AppConfig,
    classifier: Optional[SpeechClassifier] = None,
    progress: Optional[ProgressCallback] = None,
    base_dir: Optional[Path] = None,
) -> list[Segment]:
    """Segment decoded int16 mono audio into merged speech segments."""
    content = to_mono(audio)
    if content.size == 0:
        raise DecodeError("Audio file is empty or contains no valid samples.")

    target_sr = int(config.sample_rate)
    if int(orig_sr) != target_sr:
        report_progress(
            progress, "Resampling audio", milestones.RESAMPLE_START, f"Converting from {orig_sr} Hz to {target_sr} Hz"
        )
        content = resample_audio(content, orig_sr=int(orig_sr), target_sr=target_sr)
        logger.info("Resampled %d Hz -> %d Hz: %d samples", int(orig_sr), target_sr, content.size)
        report_progress(progress, "Audio resampled", milestones.RESAMPLE_DONE, f"{content.size} samples at {target_sr} Hz")

    report_progress(progress, "Running voice activity detection", milestones.CLASSIFY_START, "Initializing voice detection")
    if classifier is None:
        classifier = build_classifier(config, base_dir=base_dir)

    labels = _classify(classifier, content, config=config, progress=progress)
    report_progress(progress, "Speech detection complete", milestones.CLASSIFY_DONE, f"Processed {len(labels)} audio chunks")

    report_progress(progress, "Extracting speech segments", milestones.EXTRACT, "Converting detection results to segments")
    raw = assemble_segments(labels, content, target_sr, int(config.vad.chunk_size))
    logger.info("Found %d initial speech segments", len(raw))

    report_progress(progress, "Optimizing segments", milestones.MERGE_START, f"Found {len(raw)} initial segments")
    merged = merge_segments(raw, content, float(config.segments.max_gap_sec), progress=progress)
    logger.info("After merging close segments: %d final segments", len(merged))
    report_progress(progress, "Segmentation complete", milestones.MERGE_DONE, f"Optimized to {len(merged)} final segments")

    report_progress(progress, "Complete", milestones.COMPLETE, None)
    return merged


def process_audio_file(
    path: Path,
    *,
    config: AppConfig,
    classifier: Optional[SpeechClassifier] = None,
    decoder: Decoder = load_audio_file,
    progress: Optional[ProgressCallback] = None,
    base_dir: Optional[Path] = None,
) -> list[Segment]:
    path = Path(path)
    ext = check_supported_format(path)
    logger.info("Processing audio file: %s (format: %s)", path, ext)
    report_progress(progress, "Validating file format", milestones.VALIDATE, f"Detected format: {ext}")

    report_progress(progress, "Decoding audio file", milestones.DECODE_START, "Reading and decoding audio data")
    audio, orig_sr = decoder(path)
    report_progress(progress, "Audio decoded", milestones.DECODE_DONE, f"{len(np.asarray(audio))} frames at {orig_sr} Hz")

    return process_audio(
        audio,
        int(orig_sr),
        config=config,
        classifier=classifier,
        progress=progress,
        base_dir=base_dir,
    )


def extract_segment_from_file(
    path: Path,
    start_s: float,
    end_s: float,
    *,
    decoder: Decoder = load_audio_file,
) -> Tuple[np.ndarray, int]:
    """Cut [start_s, end_s) out of a file at its native sample rate."""
    path = Path(path)
    check_supported_format(path)
    audio, sample_rate = decoder(path)
    content = to_mono(audio)
    return extract_time_range(content, int(sample_rate), start_s, end_s), int(sample_rate)
