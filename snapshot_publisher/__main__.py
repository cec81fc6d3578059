"""Main entry point for the snapshot publisher CLI."""

from dotenv import load_dotenv
load_dotenv()

import sys
import argparse
from typing import List, Optional

from .config import SnapshotPublishConfig, SamplesUpdateConfig, OnEmptyChanges
from .core.errors import PreconditionUnmet
from .core.logger import setup_logging
from .pipelines import pipeline_registry, PipelineExecutor
from .utils.progress import print_summary

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REFUSED = 2
EXIT_INTERRUPTED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='snapshot-publisher',
        description='Publish snapshot artifacts to a git-backed snapshot branch',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Publish a local Maven repository to the snapshots branch
  snapshot-publisher publish \\
      --remote-uri git@github.com:example/tools.git \\
      --pinned-ref 25ecdec020f57dbe980eeb052c71659ccd0d9bcc \\
      --artifact-root build/snapshots --version 1.0-SNAPSHOT

  # Preview without touching the remote
  snapshot-publisher publish --dry-run

  # Fail instead of skipping when nothing changed
  snapshot-publisher publish --on-empty fail

  # Update plugin versions in sample projects
  snapshot-publisher update-samples samples reproducers --tools-version 1.0.0
        """
    )

    parser.add_argument(
        '--list-pipelines',
        action='store_true',
        help='List available pipelines and exit'
    )

    subparsers = parser.add_subparsers(
        dest='operation',
        help='Operation to perform',
        required=False
    )

    publish_parser = subparsers.add_parser(
        'publish',
        help='Publish snapshot artifacts (clone, reset, sync, commit, push)'
    )
    _add_common_args(publish_parser)

    config_group = publish_parser.add_argument_group('configuration')
    config_group.add_argument(
        '--remote-uri',
        help='Snapshot repository URI (overrides SNAPSHOT_REMOTE_URI)'
    )
    config_group.add_argument(
        '--branch',
        help='Snapshot branch (overrides SNAPSHOT_BRANCH, default: snapshots)'
    )
    config_group.add_argument(
        '--pinned-ref',
        help='Commit the branch is reset to before publishing (overrides SNAPSHOT_PINNED_REF)'
    )
    config_group.add_argument(
        '--artifact-root',
        help='Directory holding the built artifacts (overrides SNAPSHOT_ARTIFACT_ROOT)'
    )
    config_group.add_argument(
        '--version',
        help='Version of the artifacts; only -SNAPSHOT versions are published '
             '(overrides SNAPSHOT_VERSION)'
    )
    config_group.add_argument(
        '--work-dir',
        help='Working copy location (overrides SNAPSHOT_WORK_DIR, default: new temp dir)'
    )

    behaviour_group = publish_parser.add_argument_group('publishing behaviour')
    behaviour_group.add_argument(
        '--on-empty',
        choices=[p.value for p in OnEmptyChanges],
        help='What to do when there is nothing to commit (overrides SNAPSHOT_ON_EMPTY, '
             'default: skip)'
    )
    behaviour_group.add_argument(
        '--amend',
        action='store_true',
        help='Amend the previous commit instead of adding a new one'
    )
    behaviour_group.add_argument(
        '--lease',
        action='store_true',
        help='Push with --force-with-lease so a concurrent publish is detected'
    )
    behaviour_group.add_argument(
        '--keep-working-copy',
        action='store_true',
        help='Keep the temporary working copy after a successful run'
    )
    behaviour_group.add_argument(
        '--parallel',
        action='store_true',
        help='Request parallel execution (refused for publishing)'
    )

    samples_parser = subparsers.add_parser(
        'update-samples',
        help='Substitute versions in sample pom.xml and gradle.properties files'
    )
    _add_common_args(samples_parser)
    samples_parser.add_argument(
        'directories',
        nargs='+',
        metavar='DIR',
        help='Directory whose subdirectories are sample projects'
    )
    samples_parser.add_argument(
        '--tools-version',
        metavar='VERSION',
        help='Version for the native plugin and JUnit native keys'
    )
    samples_parser.add_argument(
        '--set',
        action='append',
        dest='assignments',
        metavar='KEY=VALUE',
        help='Set an arbitrary version property (can be repeated)'
    )

    return parser


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    exec_group = parser.add_argument_group('execution control')
    exec_group.add_argument(
        '--dry-run',
        action='store_true',
        help='Preview changes without executing'
    )
    exec_group.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )


def _run_publish(args, executor: PipelineExecutor, logger) -> int:
    config = SnapshotPublishConfig.from_env_and_args(
        remote_uri=args.remote_uri,
        branch=args.branch,
        pinned_ref=args.pinned_ref,
        artifact_root=args.artifact_root,
        version=args.version,
        work_dir=args.work_dir,
        on_empty=args.on_empty,
        amend=args.amend,
        lease=args.lease,
        keep_working_copy=args.keep_working_copy,
        parallel=args.parallel
    )
    logger.info("Configuration loaded")

    run = executor.publish_snapshots(config)
    print_summary(run)
    return EXIT_FAILED if run.failed else EXIT_OK


def _run_update_samples(args, executor: PipelineExecutor, logger) -> int:
    config = SamplesUpdateConfig.from_args(
        directories=args.directories,
        tools_version=args.tools_version,
        assignments=args.assignments
    )
    logger.info("Configuration loaded")

    run = executor.update_samples(config)
    print_summary(run)
    return EXIT_FAILED if run.failed else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.list_pipelines:
        print("Available pipelines:")
        for name in pipeline_registry.list_pipelines():
            pipeline_class = pipeline_registry.get(name)
            desc = getattr(pipeline_class, 'description', 'No description')
            print(f"  {name}: {desc}")
        return EXIT_OK

    if not args.operation:
        parser.print_help()
        return EXIT_FAILED

    logger = setup_logging(operation=args.operation, verbose=args.verbose)
    executor = PipelineExecutor(dry_run=args.dry_run)

    try:
        if args.operation == 'publish':
            return _run_publish(args, executor, logger)
        return _run_update_samples(args, executor, logger)

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_REFUSED
    except PreconditionUnmet as e:
        logger.error(f"Refusing to run: {e}")
        return EXIT_REFUSED
    except KeyboardInterrupt:
        logger.info("\nOperation cancelled by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
