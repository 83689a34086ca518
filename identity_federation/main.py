#!/usr/bin/env python3
"""
Identity Federation Provisioner

Composition root and application entry point.
Wires together all layers following hexagonal architecture principles.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from . import __version__
from .application.use_cases import (
    ProvisionResult,
    ProvisionWorkloadIdentity,
    TeardownResult,
    TeardownWorkloadIdentity,
)
from .domain.exceptions import IdentityFederationError
from .domain.value_objects import WorkloadIdentityRequest, service_account_subject
from .infrastructure.adapters import EntraIdDirectoryGateway, GraphClient
from .infrastructure.config import Settings, load_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


class ApplicationContainer:
    """
    Dependency injection container.

    Responsible for creating and wiring all application components.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize container with settings."""
        self._settings = settings
        self._gateway: EntraIdDirectoryGateway | None = None

    def create_directory_gateway(self) -> EntraIdDirectoryGateway:
        """Create the directory gateway adapter (one per container)."""
        if self._gateway is None:
            self._gateway = EntraIdDirectoryGateway(GraphClient(self._settings.graph_config))
        return self._gateway

    def create_provision_use_case(self) -> ProvisionWorkloadIdentity:
        """Create the provisioning use case."""
        return ProvisionWorkloadIdentity(
            self.create_directory_gateway(),
            default_tags=self._settings.service_principal_tags,
        )

    def create_teardown_use_case(self) -> TeardownWorkloadIdentity:
        """Create the teardown use case."""
        return TeardownWorkloadIdentity(self.create_directory_gateway())


class Application:
    """
    Main application orchestrator.

    Handles run modes (provision, teardown, or API) and lifecycle.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize application with settings."""
        self._settings = settings
        self._container = ApplicationContainer(settings)

    async def provision(self, request: WorkloadIdentityRequest) -> ProvisionResult:
        """Provision one workload identity."""
        return await self._container.create_provision_use_case().execute(request)

    async def teardown(self, request: WorkloadIdentityRequest) -> TeardownResult:
        """Tear down one workload identity."""
        return await self._container.create_teardown_use_case().execute(request)

    def run_api(self) -> None:
        """Run in API server mode."""
        import uvicorn

        from .infrastructure.adapters.api import create_app

        logger.info(
            "Starting API server on %s:%d",
            self._settings.api_host,
            self._settings.api_port,
        )

        app = create_app(
            provision_func=self.provision,
            teardown_func=self.teardown,
            default_audience=self._settings.default_audience,
            version=__version__,
        )

        uvicorn.run(
            app,
            host=self._settings.api_host,
            port=self._settings.api_port,
            log_level=self._settings.log_level.lower(),
        )

    async def run(self, args: argparse.Namespace) -> int:
        """
        Run the command selected on the command line.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        match args.command:
            case "provision":
                result = await self.provision(build_request(args, self._settings))
                print(f"application object ID: {result.application.object_id}")
                print(f"application client ID: {result.application.app_id}")
                print(f"service principal object ID: {result.service_principal.object_id}")
                print(f"federated credential ID: {result.federated_credential.object_id}")
                return 0

            case "teardown":
                result = await self.teardown(build_request(args, self._settings))
                print(f"deleted: {', '.join(sorted(result.deleted)) or 'nothing'}")
                return 0

            case _:
                logger.error("Unknown command: %s", args.command)
                return 1


def build_request(args: argparse.Namespace, settings: Settings) -> WorkloadIdentityRequest:
    """Build a workload identity request from command-line arguments."""
    subject = args.subject
    if not subject and args.service_account_namespace and args.service_account_name:
        subject = service_account_subject(args.service_account_namespace, args.service_account_name)

    return WorkloadIdentityRequest(
        application_name=args.application_name,
        issuer=args.issuer,
        subject=subject or "",
        audiences=tuple(args.audience or (settings.default_audience,)),
        credential_name=args.credential_name or "",
        service_principal_tags=frozenset(args.tag or ()),
        description=args.description,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="identity-federation",
        description="Provision and tear down Entra ID workload identities.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the HTTP API server")

    for name, help_text in (
        ("provision", "Look up or create the application, service principal and federated credential"),
        ("teardown", "Delete the federated credential, service principal and application"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--application-name", required=True, help="Application display name")
        sub.add_argument("--issuer", required=True, help="Token issuer URL to trust")
        sub.add_argument("--subject", help="Subject claim to trust")
        sub.add_argument("--service-account-namespace", help="Kubernetes service account namespace")
        sub.add_argument("--service-account-name", help="Kubernetes service account name")
        sub.add_argument("--audience", action="append", help="Accepted audience (repeatable)")
        sub.add_argument("--credential-name", help="Federated credential name")
        sub.add_argument("--tag", action="append", help="Service principal tag (repeatable)")
        sub.add_argument("--description", help="Federated credential description")

    return parser


async def async_main(args: argparse.Namespace, settings: Settings) -> int:
    """Async entry point for the one-shot commands."""
    try:
        app = Application(settings)
        return await app.run(args)

    except ValueError as e:
        logger.error("Invalid request: %s", e)
        return 1
    except IdentityFederationError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    except Exception:
        logger.exception("Unexpected error")
        return 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logger.info("Identity Federation Provisioner starting...")

    try:
        settings = load_settings()
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)
    logging.getLogger().setLevel(settings.log_level.upper())

    if args.command == "serve":
        # uvicorn runs its own event loop
        Application(settings).run_api()
        sys.exit(0)

    try:
        exit_code = asyncio.run(async_main(args, settings))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
