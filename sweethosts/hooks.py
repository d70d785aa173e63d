"""Post-apply command hook.

After the system hosts file is applied, the frontend may run the shell
command configured under ``cmd_after_hosts_apply`` (for example to flush
a DNS cache). Each run is recorded in cmd_history.json, separate from
the hosts history. Running the hook is the caller's decision; the apply
pipeline never does it on its own.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from sweethosts.preferences import CMD_AFTER_HOSTS_APPLY, ConfigSource
from sweethosts.profiles.schema import CommandRecord, validate_items
from sweethosts.profiles.trash import now_ms
from sweethosts.storage import JsonDocument, data_dir_lock

logger = logging.getLogger(__name__)

CMD_HISTORY_FILENAME = "cmd_history.json"


class CommandHistoryLog:
    """Records of post-apply command runs."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.document = JsonDocument(data_dir / CMD_HISTORY_FILENAME)

    def list(self) -> list[CommandRecord]:
        return validate_items(
            CommandRecord, self.document.read(), CMD_HISTORY_FILENAME
        )[0]

    def append(self, record: CommandRecord) -> bool:
        with data_dir_lock(self.data_dir):
            records = self.document.read()
            records.append(record.model_dump())
            return self.document.write(records)

    def delete(self, record_id: str) -> bool:
        """Delete records whose ``id`` or legacy ``_id`` matches.

        Returns:
            True if anything was removed.
        """
        with data_dir_lock(self.data_dir):
            records = self.document.read()
            kept = [
                r
                for r in records
                if not isinstance(r, dict)
                or (r.get("id") != record_id and r.get("_id") != record_id)
            ]
            if len(kept) == len(records):
                return False
            return self.document.write(kept)

    def clear(self) -> bool:
        with data_dir_lock(self.data_dir):
            return self.document.write([])


def run_command(command: str, timeout: int | None = None) -> CommandRecord:
    """Run a shell command and capture its outcome.

    Launch failures and timeouts are reported as unsuccessful records.

    Args:
        command: Shell command line.
        timeout: Timeout in seconds (None = no timeout).

    Returns:
        CommandRecord with captured output.
    """
    timestamp = now_ms()
    logger.info("Running post-apply command")
    try:
        result = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
        success = result.returncode == 0
        stdout, stderr = result.stdout, result.stderr
        if not success:
            logger.warning("Post-apply command exited with %d", result.returncode)
    except subprocess.TimeoutExpired:
        success, stdout = False, ""
        stderr = f"Command timed out after {timeout} seconds"
        logger.error(stderr)
    except OSError as e:
        success, stdout, stderr = False, "", str(e)
        logger.error("Failed to run post-apply command: %s", e)

    return CommandRecord(
        id=str(timestamp),
        success=success,
        stdout=stdout,
        stderr=stderr,
        add_time_ms=timestamp,
    )


def run_post_apply_command(
    config: ConfigSource,
    cmd_history: CommandHistoryLog,
    timeout: int | None = None,
) -> CommandRecord | None:
    """Run the configured post-apply command, if any, and record it.

    Args:
        config: Source of the ``cmd_after_hosts_apply`` preference.
        cmd_history: Log receiving the run record.
        timeout: Command timeout in seconds.

    Returns:
        The run record, or None when no command is configured.
    """
    command = config.get(CMD_AFTER_HOSTS_APPLY)
    if not isinstance(command, str) or not command.strip():
        return None

    record = run_command(command, timeout=timeout)
    if not cmd_history.append(record):
        logger.error("Failed to record post-apply command run")
    return record


__all__ = [
    "CMD_HISTORY_FILENAME",
    "CommandHistoryLog",
    "run_command",
    "run_post_apply_command",
]
