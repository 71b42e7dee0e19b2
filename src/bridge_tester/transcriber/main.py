"""
Bridge Tester Transcriber.

Entry point for the transcription worker process.
"""

from ddtrace import patch_all

from bridge_tester.transcriber.dependencies import get_worker

patch_all()


def main():
    """Starts the worker."""
    worker = get_worker()
    worker.start()


if __name__ == "__main__":
    main()
