"""Entry point for the PR metadata action."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import requests

from .actions import configure_logging, set_output
from .aggregator import aggregate
from .cli import parse_args
from .config import load_config
from .context import load_event_context
from .errors import (
    AuthenticationError,
    ConfigurationError,
    ContextError,
    DeliveryError,
    UpstreamFetchError,
)
from .github_client import GitHubClient
from .submitter import Submitter

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_UPSTREAM_ERROR = 4
EXIT_CONTEXT_ERROR = 5
EXIT_DELIVERY_ERROR = 6


def run_action(argv: Optional[Sequence[str]] = None) -> int:
    """Run the action once and return a process exit code.

    A run that is skipped because the pull request is not merged counts as a
    success. The ``http_status`` output is written whenever a submission was
    attempted, including when every attempt failed.
    """
    try:
        args = parse_args(argv)
        configure_logging(debug=args.debug)

        config = load_config(
            github_token=args.github_token,
            api_endpoint=args.api_endpoint,
            teampulse_token=args.teampulse_token,
            github_api_url=args.github_api_url,
        )
        context = load_event_context(event_path=args.event_path, repository=args.repository)

        if not context.is_merged():
            logger.info("PR is not merged. Skipping action.")
            return EXIT_SUCCESS

        ref = context.pull_request_ref()
        logger.info(
            "Collecting pull request metadata",
            extra={"repository": ref.repository.full_name, "pr_number": ref.number},
        )

        with GitHubClient(config=config) as client:
            payload = aggregate(client, ref)

        with requests.Session() as session:
            result = Submitter(session=session).submit(
                payload, config.api_endpoint, config.teampulse_token
            )
        set_output("http_status", result.status, output_path=args.output_file)

        if not result.succeeded:
            raise DeliveryError(result.error or "Delivery failed.", status_code=result.status)

        return EXIT_SUCCESS
    except ConfigurationError as exc:
        logger.error(str(exc))
        return EXIT_CONFIGURATION_ERROR
    except AuthenticationError as exc:
        logger.error(str(exc))
        return EXIT_AUTHENTICATION_ERROR
    except ContextError as exc:
        logger.error(str(exc))
        return EXIT_CONTEXT_ERROR
    except UpstreamFetchError as exc:
        logger.error(f"Failed to collect pull request data: {exc}")
        return EXIT_UPSTREAM_ERROR
    except DeliveryError as exc:
        logger.error(str(exc))
        return EXIT_DELIVERY_ERROR
    except Exception as exc:
        logger.error(f"Action failed: {exc}")
        return EXIT_UNEXPECTED_ERROR


def main() -> None:
    raise SystemExit(run_action())


if __name__ == "__main__":
    main()
