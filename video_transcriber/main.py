"""
main.py

Command-line entry point.
Batch processor: transcribes every URL given on the command line or listed in a
URL file, prints the results and optionally saves each one to JSON.
"""

import argparse
import json
import logging
import os
import time
from datetime import datetime
from typing import List, Optional, Sequence

from .config import Settings
from .errors import PipelineError
from .pipeline import TranscriptionJob, TranscriptionPipeline, create_pipeline
from .postprocess import Mode, parse_mode


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Args:
        seconds: Duration in seconds

    Returns:
        str: Formatted duration (e.g., "2m 35s", "1h 15m 23s", "42s")
    """
    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds}s"

    minutes = seconds // 60
    secs = seconds % 60

    if minutes < 60:
        return f"{minutes}m {secs}s"

    hours = minutes // 60
    mins = minutes % 60
    return f"{hours}h {mins}m {secs}s"


def load_urls(path: str) -> List[str]:
    """
    Load video URLs from a text file.

    Returns:
        List[str]: Non-empty, non-comment lines
    """
    if not os.path.exists(path):
        return []

    urls = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if line and not line.startswith('#'):
                urls.append(line)

    return urls


def save_result(data: dict, output_dir: str) -> str:
    """
    Save a transcription result to an individual JSON file named after its id.

    Returns:
        str: Path of the written file
    """
    os.makedirs(output_dir, exist_ok=True)

    filepath = os.path.join(output_dir, f"{data['id']}.json")
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=4)

    return filepath


def process_video(
    url: str,
    pipeline: TranscriptionPipeline,
    index: int,
    total: int,
    language: str,
    mode: Mode,
    output_dir: Optional[str] = None,
) -> bool:
    """
    Transcribe a single video and report the outcome.

    Returns:
        bool: True if processing succeeded, False otherwise
    """
    print()
    print("=" * 80)
    print(f"=== Processing [{index} / {total}]: {url} ===")
    print("=" * 80)

    job = TranscriptionJob(url=url, language=language, mode=mode)
    start = time.time()

    try:
        pipeline.run(job)
    except PipelineError as e:
        print(f"✗ {e}")
        return False

    print(f"✓ Transcription complete in {format_duration(time.time() - start)}")
    print()
    print(job.text)

    if output_dir:
        data = {
            "id": f"transcript_{job.job_id}",
            "url": url,
            "title": job.video.title if job.video else None,
            "language": language,
            "mode": mode.value,
            "processed_date": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "text": job.text,
        }
        print(f"✓ Transcript saved to: {save_result(data, output_dir)}")

    return True


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="video-transcriber",
        description="Download videos, extract their audio and transcribe it to text.",
    )
    parser.add_argument("urls", nargs="*", help="video URLs to transcribe")
    parser.add_argument("--urls-file", help="file with one URL per line (# starts a comment)")
    parser.add_argument("--language", default="en", help="language hint for transcription (default: en)")
    parser.add_argument(
        "--mode",
        default=Mode.NORMAL.value,
        help="post-processing mode: normal, detailed or summary (default: normal)",
    )
    parser.add_argument("--output-dir", help="save each transcript as JSON in this directory")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main batch processing workflow.
    Processes each URL sequentially; a failed URL does not stop the batch.
    """
    args = parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"✗ Invalid configuration: {e}")
        return 1

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    mode = parse_mode(args.mode)

    # Display banner
    print()
    print("=" * 80)
    print("VIDEO TRANSCRIBER")
    print("Video URL -> Audio -> Transcription -> Text")
    print("=" * 80)
    print(f"Backend: {settings.transcription_backend} | Language: {args.language} | Mode: {mode.value}")
    print("=" * 80)

    urls = list(args.urls)
    if args.urls_file:
        urls.extend(load_urls(args.urls_file))

    if not urls:
        print("⚠ No URLs given. Pass URLs as arguments or use --urls-file.")
        return 1

    try:
        pipeline = create_pipeline(settings)
    except (ValueError, RuntimeError, ImportError, OSError) as e:
        print(f"✗ Failed to initialize transcription pipeline: {e}")
        return 1

    success_count = 0
    for i, url in enumerate(urls, start=1):
        if process_video(url, pipeline, i, len(urls), args.language, mode, args.output_dir):
            success_count += 1

    failure_count = len(urls) - success_count

    # Final summary
    print()
    print("=" * 80)
    print("BATCH PROCESSING COMPLETE!")
    print(f"✓ Successful: {success_count}")
    print(f"✗ Failed: {failure_count}")
    print("=" * 80)

    return 1 if failure_count else 0


if __name__ == "__main__":
    raise SystemExit(main())
