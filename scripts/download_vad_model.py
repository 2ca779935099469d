from __future__ import annotations

import argparse
import shutil
from pathlib import Path


def main() -> int:
    parser = argparse.ArgumentParser(description="Download the Silero VAD ONNX model for speechcut.")
    parser.add_argument(
        "--repo-id",
        default="onnx-community/silero-vad",
        help="HuggingFace model repo id (default: onnx-community/silero-vad)",
    )
    parser.add_argument(
        "--filename",
        default="onnx/model.onnx",
        help="File inside the repo (default: onnx/model.onnx)",
    )
    parser.add_argument(
        "--out",
        default="models/silero_vad.onnx",
        help="Destination path inside the project (default: models/silero_vad.onnx)",
    )
    parser.add_argument(
        "--revision",
        default="",
        help="Optional git revision / tag / commit SHA.",
    )

    args = parser.parse_args()
    out_path = Path(args.out).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        from huggingface_hub import hf_hub_download  # type: ignore
    except Exception as exc:
        raise SystemExit("huggingface_hub is required. Install: pip install 'speechcut[models]'") from exc

    cached = hf_hub_download(
        repo_id=str(args.repo_id),
        filename=str(args.filename),
        repo_type="model",
        revision=str(args.revision) if args.revision else None,
    )
    shutil.copyfile(cached, out_path)

    print(f"Downloaded to: {out_path}")
    print("Next: set `model.backend: auto` (or `onnx`) and `model.path` to this file in config.yaml.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
