"""Shared CLI parameter definitions.

The `show` and `restore` commands take the same options. Each option is
defined once here as an ``Annotated`` type so both command signatures stay
in sync:

    @app.command()
    def my_command(bucket_name: BucketNameOption, threads: ThreadsOption = 5):
        pass

Parameter Categories:
    - Target parameters: bucket and prefix file
    - AWS parameters: credentials, region, endpoint, profile
    - Run parameters: concurrency and failure policy
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

BucketNameOption = Annotated[
    str, typer.Option("--bucket-name", "-b", help="S3 bucket name")
]

PrefixesFileOption = Annotated[
    Path,
    typer.Option(
        "--prefixes-file",
        "-f",
        help="File with one prefix per line (first CSV column is used)",
    ),
]

ThreadsOption = Annotated[
    int,
    typer.Option(
        "--threads", "-t", min=1, help="Number of prefixes restored concurrently"
    ),
]

AccessKeyIdOption = Annotated[
    Optional[str],
    typer.Option(
        "--aws-access-key-id",
        "-i",
        help="AWS access key ID (default from env AWS_ACCESS_KEY_ID)",
    ),
]

SecretAccessKeyOption = Annotated[
    Optional[str],
    typer.Option(
        "--aws-secret-access-key",
        "-k",
        help="AWS secret access key (default from env AWS_SECRET_ACCESS_KEY)",
    ),
]

SessionTokenOption = Annotated[
    Optional[str],
    typer.Option("--session-token", help="AWS session token"),
]

RegionOption = Annotated[
    str, typer.Option("--aws-region", "-r", help="AWS region name")
]

EndpointUrlOption = Annotated[
    Optional[str],
    typer.Option("--endpoint-url", help="Custom S3 endpoint URL"),
]

ProfileOption = Annotated[
    Optional[str],
    typer.Option("--aws-profile", help="AWS CLI profile name"),
]

IsolateFailuresOption = Annotated[
    bool,
    typer.Option(
        "--isolate-failures",
        help="Keep restoring other prefixes when one prefix fails",
    ),
]
