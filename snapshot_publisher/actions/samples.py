"""Version substitution in sample projects."""

import re
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Pattern, Tuple, TYPE_CHECKING

from .base import Action
from ..core.types import ActionResult, Status

if TYPE_CHECKING:
    from ..core.types import PipelineContext

logger = logging.getLogger('snapshot_publisher')

# LF, CR and CRLF end a line; any other character is line content
_LINE_BREAK = re.compile(r"(\r\n|\n|\r)")
# Any character except a line terminator (\n, \r, NEL, LS, PS)
_ANY = "[^\n\r\x85\u2028\u2029]"
# Horizontal whitespace around "="
_SPACE = r"[ \t\x0b\x0c]"


def pom_matcher(key: str) -> Pattern:
    """Match a full pom.xml line holding <key>version</key>."""
    quoted = re.escape(key)
    return re.compile(rf"({_ANY}*?<{quoted}>)({_ANY}+?)(</{quoted}>{_ANY}*)")


def properties_matcher(key: str) -> Pattern:
    """Match a full gradle.properties line assigning key."""
    quoted = re.escape(key)
    return re.compile(rf"({quoted}{_SPACE}*={_SPACE}*)({_ANY}+)()")


def substitute_versions(
    text: str,
    versions: Dict[str, str],
    matcher: Callable[[str], Pattern]
) -> str:
    """Replace the version of every line that fully matches one of the keys.

    The first key whose pattern matches the whole line wins. Lines end at
    LF, CR or CRLF only, and line endings are preserved.

    Args:
        text: File content
        versions: Mapping of property key to new version
        matcher: Builds the line pattern for a key

    Returns:
        The rewritten content
    """
    matchers: List[Tuple[str, Pattern]] = [(key, matcher(key)) for key in versions]
    parts = _LINE_BREAK.split(text)
    bodies, endings = parts[0::2], parts[1::2] + ['']
    lines = []
    for body, ending in zip(bodies, endings):
        for key, pattern in matchers:
            match = pattern.fullmatch(body)
            if match:
                body = f"{match.group(1)}{versions[key]}{match.group(3)}"
                break
        lines.append(body + ending)
    return ''.join(lines)


SAMPLE_FILES: Dict[str, Callable[[str], Pattern]] = {
    'pom.xml': pom_matcher,
    'gradle.properties': properties_matcher,
}


def update_sample(sample: Path, versions: Dict[str, str], dry_run: bool = False) -> List[Path]:
    """Rewrite the build files of one sample project.

    Args:
        sample: Sample project directory
        versions: Mapping of property key to new version
        dry_run: Compute changes without writing them

    Returns:
        Files whose content changed (or would change)
    """
    changed = []
    for filename, matcher in SAMPLE_FILES.items():
        path = sample / filename
        if not path.is_file():
            continue
        with open(path, encoding='utf-8', newline='') as f:
            original = f.read()
        updated = substitute_versions(original, versions, matcher)
        if updated != original:
            if not dry_run:
                with open(path, 'w', encoding='utf-8', newline='') as f:
                    f.write(updated)
            changed.append(path)
    return changed


class UpdateSampleVersionsAction(Action):
    """Substitute version properties in every sample under a directory."""

    name = "update-sample-versions"
    description = "Update version properties in sample pom.xml and gradle.properties files"

    def __init__(self, directory: Path, versions: Optional[Dict[str, str]] = None):
        """Initialize samples update action.

        Args:
            directory: Directory whose immediate children are sample projects
            versions: Versions to apply (defaults to the context's samples config)
        """
        self.directory = Path(directory)
        self.versions = versions

    def execute(self, ctx: 'PipelineContext') -> ActionResult:
        versions = self.versions
        if versions is None:
            versions = ctx.samples_config.versions if ctx.samples_config else {}

        if not self.directory.is_dir():
            return ActionResult(
                status=Status.FAILED,
                message=f"Samples directory does not exist: {self.directory}",
                action_name=self.name
            )

        changed: List[Path] = []
        try:
            for sample in sorted(self.directory.iterdir()):
                if sample.is_dir():
                    changed.extend(update_sample(sample, versions, dry_run=ctx.dry_run))
        except OSError as e:
            return ActionResult(
                status=Status.FAILED,
                message=f"{self.name} failed in {self.directory}: {e}",
                action_name=self.name,
                metadata={'error': str(e)}
            )

        for path in changed:
            logger.info(f"{'Would update' if ctx.dry_run else 'Updated'} {path}")

        verb = "Would update" if ctx.dry_run else "Updated"
        return ActionResult(
            status=Status.SUCCESS,
            message=f"{verb} {len(changed)} file(s) in {self.directory}",
            action_name=self.name,
            metadata={'changed': [str(p) for p in changed], 'dry_run': ctx.dry_run}
        )
