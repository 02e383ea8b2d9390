"""Error formatting for CLI output."""

from gitflow_version.versioning.exceptions import (
    ArtifactNotFoundError,
    BranchClassificationError,
    BuildToolError,
    VersioningError,
    VersionParseError,
    WriteVerificationError,
)


def _location(source, line_number: int) -> str:
    """Render the offending artifact line with a marker under its content."""
    try:
        with open(source, "r") as f:
            lines = f.readlines()
    except OSError:
        return f"\n  File: {source}\n  Line: {line_number}\n"

    if not 0 < line_number <= len(lines):
        return f"\n  File: {source}\n  Line: {line_number}\n"

    line_content = lines[line_number - 1].rstrip()
    width = len(str(line_number))
    indent = len(line_content) - len(line_content.lstrip())
    marker = " " * indent + "^" * max(1, len(line_content.strip()))
    return (
        f"\n  --> {source}:{line_number}\n"
        f"{line_number:>{width}} | {line_content}\n"
        f"{' ' * width} | {marker}\n"
    )


def format_versioning_error(error: VersioningError) -> str:
    """Format a VersioningError with its location and context for the user.

    Example output:
        Invalid version format: '1.5'. Expected MAJOR.MINOR.PATCH, ...
          --> /repo/pom.xml:12
        12 |         <revision>1.5</revision>
           |         ^^^^^^^^^^^^^^^^^^^^^^^^

          Reason: UnrecognizedGrammar
    """
    message_parts = [str(error)]

    if isinstance(error, VersionParseError) and error.source and error.line_number:
        message_parts.append(_location(error.source, error.line_number))

    context_parts = []
    reason = getattr(error, "reason", None)
    if reason is not None:
        context_parts.append(f"  Reason: {reason.value}")
    if isinstance(error, BranchClassificationError):
        context_parts.append(f"  Branch: {error.branch}")
    if isinstance(error, ArtifactNotFoundError):
        context_parts.append(f"  Artifact: {error.path}")
    if isinstance(error, WriteVerificationError):
        context_parts.append(f"  Expected: {error.expected}")
        context_parts.append(f"  Stored: {error.actual}")
    if isinstance(error, BuildToolError):
        context_parts.append(f"  Command: {' '.join(error.command)}")
        if error.output:
            context_parts.append(f"  Output: {error.output.strip()}")

    if context_parts:
        message_parts.append("\n" + "\n".join(context_parts))

    return "".join(message_parts)
