"""Build context shared by every stage of a build."""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import pendulum
from rich.console import Console

from .config import Config, OptionsModel

logger = logging.getLogger(__name__)

STAGING_PREFIX = "feedpage-"


class BuildContext:
    """Options, resolved paths and build time of a single build.

    The staging directory is private to the build; artifacts are written
    there first and only copied into ``build_dir`` when the build succeeds.
    """

    def __init__(
        self,
        options: OptionsModel,
        urls_file: Path,
        cache_file: Path,
        build_dir: Path,
        template_path: Path,
        staging_dir: Path,
        build_time: int,
        debug: bool = False,
        console: Console = None,
    ) -> None:
        self.options = options
        self.urls_file = urls_file
        self.cache_file = cache_file
        self.build_dir = build_dir
        self.template_path = template_path
        self.staging_dir = staging_dir
        self.build_time = build_time
        self.debug = debug
        self.console = console or Console()


@contextmanager
def build_context(
    config: Config,
    debug: bool = False,
    console: Console = None,
) -> Generator[BuildContext, None, None]:
    """
    Create a build context with a fresh staging directory.

    The staging directory is removed on exit, whether the build succeeded
    or not.
    """
    staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX))
    logger.info(f"Created staging directory {staging_dir}")
    try:
        yield BuildContext(
            options=config.options,
            urls_file=config.urls_file,
            cache_file=config.cache_file,
            build_dir=config.build_dir,
            template_path=config.template_path,
            staging_dir=staging_dir,
            build_time=pendulum.now("UTC").int_timestamp,
            debug=debug,
            console=console,
        )
    finally:
        shutil.rmtree(staging_dir, ignore_errors=True)
        logger.info(f"Removed staging directory {staging_dir}")
