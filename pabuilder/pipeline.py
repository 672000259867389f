"""The resolve pipeline.

Start -> Probing -> {DoneFound | Inferring} -> Fetching -> Building ->
Emitting -> DoneBuilt. Each stage finishes before the next starts; any
fatal ``BuildError`` propagates to the caller untouched.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .builder import get_platform_builder
from .cli_logger import logger
from .config import FORCE_BUILD_ENV_VAR, Settings
from .models import BuildContext, LinkDirectives, ProbeResult, detect_host_platform
from .utils import cross_target_from_env, pkg_config


class Stage(str, Enum):
    START = "start"
    PROBING = "probing"
    INFERRING = "inferring"
    FETCHING = "fetching"
    BUILDING = "building"
    EMITTING = "emitting"
    DONE_FOUND = "done-found"
    DONE_BUILT = "done-built"


@dataclass(frozen=True)
class PipelineResult:
    stage: Stage
    probe: Optional[ProbeResult] = None
    directives: Optional[LinkDirectives] = None
    built: bool = False


def should_probe(settings, environ):
    return not (settings.force_build or FORCE_BUILD_ENV_VAR in environ)


def _enter(stage, detail=""):
    logger.debug(f"Pipeline stage: {stage.value} {detail}".rstrip())


def resolve(settings: Settings, environ=None, builder=None, work_dir=None) -> PipelineResult:
    environ = os.environ if environ is None else environ
    _enter(Stage.START)

    probe_result = None
    if should_probe(settings, environ):
        _enter(Stage.PROBING)
        probe_result = pkg_config.probe(settings.package, settings.min_version)
        if probe_result.found:
            return PipelineResult(
                stage=Stage.DONE_FOUND,
                probe=probe_result,
                directives=pkg_config.system_link_directives(settings.package),
            )
    else:
        logger.info(f"Source build forced ({FORCE_BUILD_ENV_VAR} or --force-build); skipping the pkg-config probe.")

    host_platform = detect_host_platform(settings.platform)
    ctx = BuildContext(
        output_dir=settings.output_dir,
        host_platform=host_platform,
        cross_target=cross_target_from_env(environ),
        work_dir=work_dir or os.getcwd(),
    )
    _enter(Stage.INFERRING, str(ctx))
    if builder is None:
        builder = get_platform_builder(host_platform, settings.archive, settings.fetch_tool)

    built = False
    artifact = builder.expected_artifact(ctx)
    if artifact.exists():
        logger.info(f"Found existing {artifact.static_library_path}; skipping download and build.")
    else:
        os.makedirs(ctx.output_dir, exist_ok=True)
        _enter(Stage.FETCHING)
        builder.download(ctx)
        _enter(Stage.BUILDING)
        builder.build(ctx)
        built = True

    _enter(Stage.EMITTING)
    directives = builder.link_directives(ctx)
    return PipelineResult(
        stage=Stage.DONE_BUILT, probe=probe_result, directives=directives, built=built
    )
