import asyncio
import os
import sys

import structlog

from . import args
from . import build
from . import env
from . import kube_util
from . import run
from .config import Config
from .errors import KubePlexError
from .log import configure_logging

logger = structlog.get_logger()


def prepare(environ: dict[str, str], argv: list[str], cwd: str, config: Config):
    job_env = env.rewrite_env(env.from_environ(environ))
    job_args = args.rewrite_args(argv, config.internal_address)

    logger.debug("forwarding_env", names=[e.name for e in job_env])
    logger.debug("forwarding_args", args=job_args)

    return build.build_job_spec(cwd, job_env, job_args, config)


def launch(environ: dict[str, str], argv: list[str], cwd: str) -> int:
    config = Config.from_env(environ)
    configure_logging(config.log_level)

    spec = prepare(environ, argv, cwd, config)
    pods = kube_util.PodClient(kube_util.load_core_api())

    outcome = asyncio.run(run.run_job(pods, spec))
    logger.info("finished", outcome=str(outcome))

    return 1 if outcome is run.Outcome.FAILED else 0


def main() -> None:
    configure_logging()

    # The whole argv, program name included, is the transcoder command line
    try:
        code = launch(dict(os.environ), list(sys.argv), os.getcwd())
    except (KubePlexError, OSError) as e:
        logger.error("fatal", error=str(e))
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
