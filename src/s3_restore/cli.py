"""Command-line interface for s3-restore.

Commands:
    - show: List the delete-marked objects that would be restored (dry run)
    - restore: Remove the latest delete markers, making the objects visible

Both commands read prefixes from a file (first CSV column, header
`embed_code` skipped) and process them concurrently.
"""

import threading
import warnings
from pathlib import Path
from typing import Annotated, Optional

import typer

from . import __version__
from .cli_params import (
    AccessKeyIdOption,
    BucketNameOption,
    EndpointUrlOption,
    IsolateFailuresOption,
    PrefixesFileOption,
    ProfileOption,
    RegionOption,
    SecretAccessKeyOption,
    SessionTokenOption,
    ThreadsOption,
)
from .core import settings
from .core.exceptions import (
    ConfigurationError,
    EmptyPrefixSetWarning,
    RestoreFailedError,
)
from .objectstorage.clients import S3ClientConfig
from .prefixes import load_prefixes
from .restore import RestoreReporter, restore_prefixes
from .schemas import PrefixResult, PrefixStatus, RestoreMode, RestoreOutcome

app = typer.Typer(
    name="s3-restore",
    help="Restore deleted objects in versioned S3 buckets by prefix.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"s3-restore {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    S3-Restore: remove delete markers under a list of prefixes.
    """
    pass


class EchoReporter(RestoreReporter):
    """Prints one line per event; safe to call from worker threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def _echo(self, message: str, err: bool = False) -> None:
        with self._lock:
            typer.echo(message, err=err)

    def prefix_started(self, prefix: str) -> None:
        self._echo(f"--- Started prefix: {prefix}")

    def marker_found(self, prefix: str, key: str) -> None:
        self._echo(f"*** Would have restored {key}")

    def marker_restored(self, prefix: str, key: str, elapsed_seconds: float) -> None:
        self._echo(f"*** {key} restored in {elapsed_seconds:.3f}s")

    def prefix_finished(self, result: PrefixResult) -> None:
        if result.status is PrefixStatus.FAILED:
            self._echo(
                f"--- Prefix {result.prefix} failed after "
                f"{result.elapsed_seconds:.3f}s: {result.error}",
                err=True,
            )
        else:
            self._echo(
                f"--- Prefix {result.prefix} done in {result.elapsed_seconds:.3f}s"
            )

    def run_finished(self, outcome: RestoreOutcome) -> None:
        summary = (
            f"=== All done in {outcome.elapsed_seconds:.3f}s, "
            f"restored objects: {outcome.total_restored}"
        )
        if outcome.mode is RestoreMode.DRY_RUN:
            summary += f", would restore: {outcome.total_candidates}"
        self._echo(summary)


def _print_status_table(outcome: RestoreOutcome) -> None:
    typer.echo("Prefix status:", err=True)
    for result in outcome.results:
        line = (
            f"  {result.status.value:<9} {result.prefix} "
            f"(restored {result.restored_count})"
        )
        if result.error:
            line += f": {result.error}"
        typer.echo(line, err=True)


def _run(
    mode: RestoreMode,
    bucket_name: str,
    prefixes_file: Path,
    threads: int,
    access_key_id: Optional[str],
    secret_access_key: Optional[str],
    session_token: Optional[str],
    region_name: str,
    endpoint_url: Optional[str],
    aws_profile: Optional[str],
    isolate_failures: bool,
) -> None:
    try:
        if not bucket_name.strip():
            raise ConfigurationError("--bucket-name must not be empty")

        prefixes = load_prefixes(prefixes_file)
        typer.echo(f"Total prefixes: {len(prefixes)}")

        client_config = S3ClientConfig(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_profile=aws_profile,
            max_pool_connections=max(10, threads),
        )

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", EmptyPrefixSetWarning)
            restore_prefixes(
                prefixes,
                bucket=bucket_name,
                mode=mode,
                max_concurrency=threads,
                fail_fast=not isolate_failures,
                client_config=client_config,
                reporter=EchoReporter(),
            )

    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(2)
    except RestoreFailedError as e:
        _print_status_table(e.outcome)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("show")
def show_cmd(
    bucket_name: BucketNameOption,
    prefixes_file: PrefixesFileOption,
    threads: ThreadsOption = settings.max_concurrency,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = settings.region_name,
    endpoint_url: EndpointUrlOption = None,
    aws_profile: ProfileOption = None,
    isolate_failures: IsolateFailuresOption = False,
) -> None:
    """
    Show all deleted objects under the prefixes without restoring them.

    Example:
        s3-restore show -b my-bucket -f prefixes.csv --aws-profile ops
    """
    _run(
        RestoreMode.DRY_RUN,
        bucket_name,
        prefixes_file,
        threads,
        access_key_id,
        secret_access_key,
        session_token,
        region_name,
        endpoint_url,
        aws_profile,
        isolate_failures,
    )


@app.command("restore")
def restore_cmd(
    bucket_name: BucketNameOption,
    prefixes_file: PrefixesFileOption,
    threads: ThreadsOption = settings.max_concurrency,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = settings.region_name,
    endpoint_url: EndpointUrlOption = None,
    aws_profile: ProfileOption = None,
    isolate_failures: IsolateFailuresOption = False,
) -> None:
    """
    Restore all deleted objects under the prefixes by removing delete markers.

    Example:
        s3-restore restore -b my-bucket -f prefixes.csv -t 10
    """
    _run(
        RestoreMode.APPLY,
        bucket_name,
        prefixes_file,
        threads,
        access_key_id,
        secret_access_key,
        session_token,
        region_name,
        endpoint_url,
        aws_profile,
        isolate_failures,
    )


if __name__ == "__main__":
    app()
