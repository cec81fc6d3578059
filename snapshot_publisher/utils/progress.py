"""Result summary utilities."""

from typing import TYPE_CHECKING

from ..core.types import Status

if TYPE_CHECKING:
    from ..pipelines.executor import PipelineRun


_MARKERS = {
    Status.SUCCESS: '✓',
    Status.SKIPPED: '⊘',
    Status.FAILED: '✗',
}


def print_summary(run: 'PipelineRun') -> None:
    """Print a per-step summary of a pipeline run.

    Failures show the failing step, the command line and the exit code so
    they can be acted on without re-running with verbose logging.
    """
    results = run.context.results

    print("\n" + "=" * 60)
    print(f"SUMMARY: {run.pipeline.upper()}")
    print("=" * 60)

    if not results:
        print(f"{_MARKERS[run.result.status]} {run.result.message}")

    for result in results:
        print(f"{_MARKERS[result.status]} {result.action_name}: {result.message}")

    if run.failed:
        print(f"\nFailed step: {run.failed_step}")
        command = run.result.metadata.get('command')
        if command:
            print(f"  Command: {command}")
            print(f"  Exit code: {run.result.metadata.get('returncode')}")
        stderr = (run.result.metadata.get('stderr') or '').strip()
        if stderr:
            print(f"  Output: {stderr}")

    print("=" * 60)
