# cli.py

"""Command-line interface for Hypervisor Stats."""

import argparse
import logging
import sys

from .config import DEFAULT_MAX_WORKERS, DEFAULT_NODE_QUERY
from .engine import build_reports
from .exceptions import ConfigurationError, HypervisorStatsError
from .inventory import ChefServerInventory, JsonFileInventory
from .report import render_failures, render_report
from .utils import get_chef_server_url, get_chef_session, setup_logging

logger = logging.getLogger(__name__)

EXIT_HOSTS_SKIPPED = 2

def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Show guest resource usage for KVM hypervisors registered in Chef"
    )
    parser.add_argument(
        "--name", "-u",
        dest="username",
        metavar="USERNAME",
        help="User to use when talking with the Chef API (default: $CHEF_USERNAME)"
    )
    parser.add_argument(
        "--pem", "-k",
        dest="pem_file",
        metavar="PEMFILE",
        help="Client key for the Chef API (default: $CHEF_CLIENT_KEY or USERNAME.pem)"
    )
    parser.add_argument(
        "--host", "-H",
        metavar="HOSTNAME",
        help="The hostname of the Chef server (default: $CHEF_SERVER_URL or localhost)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        help="The port the Chef server is listening on"
    )
    parser.add_argument(
        "--hypervisor",
        metavar="CHEFNODENAME",
        help="Get stats on a single hypervisor using the Chef node name"
    )
    parser.add_argument(
        "--query",
        default=DEFAULT_NODE_QUERY,
        help=f"Chef search query selecting hypervisors (default: {DEFAULT_NODE_QUERY})"
    )
    parser.add_argument(
        "--input", "-i",
        nargs="+",
        metavar="FILE",
        help="Read node JSON dumps instead of querying the Chef server"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Number of hosts processed in parallel (default: {DEFAULT_MAX_WORKERS})"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with status {EXIT_HOSTS_SKIPPED} if any host was skipped"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args(argv)

    if args.input and (args.host or args.port or args.hypervisor or args.pem_file):
        parser.error("--input cannot be combined with Chef server options")
    return args

def get_inventory(args):
    """Pick the inventory source for the given arguments."""
    if args.input:
        return JsonFileInventory(args.input)

    return ChefServerInventory(
        get_chef_server_url(args.host, args.port),
        get_chef_session(args.username, args.pem_file),
        query=args.query,
        node_name=args.hypervisor
    )

def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        nodes = get_inventory(args).fetch_nodes()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except HypervisorStatsError as e:
        logger.error(f"Inventory error: {e}")
        return 1

    fleet = build_reports(nodes, max_workers=args.workers)

    for report in fleet.reports:
        print(render_report(report))

    if fleet.failures:
        print(render_failures(fleet.failures))
        if args.strict:
            return EXIT_HOSTS_SKIPPED

    return 0

if __name__ == "__main__":
    sys.exit(main())
