from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

from speechcut.config import load_config
from speechcut.engine import build_classifier
from speechcut.errors import SpeechcutError
from speechcut.pipeline import process_audio_file
from speechcut.reports import (
    build_report,
    default_report_stem,
    ensure_reports_dir,
    write_json_report,
    write_segment_wavs,
)
from speechcut.transcribe import TranscriptionClient

logger = logging.getLogger("speechcut")


def _log_progress(step: str, percent: float, details: Optional[str] = None) -> None:
    if details:
        logger.info("[%5.1f%%] %s: %s", percent, step, details)
    else:
        logger.info("[%5.1f%%] %s", percent, step)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Split an audio file into speech segments.")
    parser.add_argument("audio", help="Input audio file (wav, mp3, m4a, aac, flac, ogg)")
    parser.add_argument("--config", default=None, help="Path to config.yaml (default: next to app.py)")
    parser.add_argument("--backend", choices=("auto", "onnx", "heuristic"), default=None)
    parser.add_argument("--max-gap", type=float, default=None, help="Merge segments closer than this (seconds)")
    parser.add_argument("--transcribe", action="store_true", help="Send each segment to the transcription API")
    parser.add_argument("--write-wavs", action="store_true", help="Also write one WAV file per segment")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    base_dir = Path(__file__).resolve().parent
    config_path = Path(args.config) if args.config else base_dir / "config.yaml"
    config = load_config(config_path)
    if args.backend:
        config = dataclasses.replace(config, model=dataclasses.replace(config.model, backend=args.backend))
    if args.max_gap is not None:
        config = dataclasses.replace(
            config, segments=dataclasses.replace(config.segments, max_gap_sec=float(args.max_gap))
        )

    audio_path = Path(args.audio)
    try:
        classifier = build_classifier(config, base_dir=base_dir)
        segments = process_audio_file(
            audio_path, config=config, classifier=classifier, progress=_log_progress, base_dir=base_dir
        )
    except SpeechcutError as exc:
        logger.error("Error processing audio file: %s", exc)
        return 2

    transcripts: Optional[list[str]] = None
    if args.transcribe:
        transcripts = []
        with TranscriptionClient(config.transcription) as client:
            for idx, segment in enumerate(segments):
                try:
                    transcripts.append(client.transcribe_segment(segment, idx))
                except SpeechcutError as exc:
                    logger.error("Transcription failed for segment %d: %s", idx, exc)
                    transcripts.append("")

    out_dir = ensure_reports_dir(base_dir=base_dir, reports_dir=config.storage.reports_dir)
    stem = default_report_stem(prefix=audio_path.stem)
    report = build_report(
        segments,
        source=str(audio_path),
        sample_rate=int(config.sample_rate),
        backend=classifier.backend,
        backend_note=classifier.backend_note,
        transcripts=transcripts,
    )
    report_path = out_dir / f"{stem}.json"
    write_json_report(report, report_path)
    logger.info("Wrote %d segments to %s", len(segments), report_path)

    if args.write_wavs or config.storage.write_wavs:
        paths = write_segment_wavs(segments, out_dir, stem=stem)
        logger.info("Wrote %d segment WAV files to %s", len(paths), out_dir)

    return 0 if segments else 1


if __name__ == "__main__":
    sys.exit(main())
